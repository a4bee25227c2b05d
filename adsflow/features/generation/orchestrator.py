"""
adsflow/features/generation/orchestrator.py

Quota-gated campaign generation.

One request walks through:
    IDLE -> AUTHENTICATING -> PROFILE_LOADING -> QUOTA_CHECKING
         -> GENERATING -> PERSISTING -> COMPLETED
with ERRORED reachable from every non-terminal state.

Side effects are strictly ordered. Nothing is written before a confirmed
successful generation, except a detected month rollover, which is
persisted as soon as it is seen and stays persisted even if generation
later fails.

If recording the increment fails after a successful generation the draft
is still returned and the failure is logged at ERROR with the user id and
pending increment for out-of-band reconciliation.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Mapping, Optional

from adsflow.core.auth import IdentityResolver, get_identity_resolver
from adsflow.core.errors import (
    AppError,
    GenerationFailedError,
    MissingPromptError,
    PersistenceFailedError,
    ProfileUnavailableError,
    QuotaExceededError,
)
from adsflow.core.logging import log_event
from adsflow.features.generation.client import CampaignGenerationClient, GenerationError
from adsflow.features.profiles.store import ProfileStore, profile_store
from adsflow.features.quota.engine import QuotaDecision, evaluate
from adsflow.models.campaign import CampaignDraft
from adsflow.models.profile import PLAN_LIMITS, Identity, PlanTier, UsageProfile


class GenerationState(str, Enum):
    IDLE = "idle"
    AUTHENTICATING = "authenticating"
    PROFILE_LOADING = "profile_loading"
    QUOTA_CHECKING = "quota_checking"
    GENERATING = "generating"
    PERSISTING = "persisting"
    COMPLETED = "completed"
    ERRORED = "errored"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class GenerationRun:
    """State of a single request; never shared between requests."""
    request_id: Optional[str] = None
    state: GenerationState = GenerationState.IDLE
    history: List[GenerationState] = field(default_factory=lambda: [GenerationState.IDLE])
    identity: Optional[Identity] = None
    profile: Optional[UsageProfile] = None
    decision: Optional[QuotaDecision] = None
    error_code: Optional[str] = None


@dataclass(frozen=True)
class GenerationOutcome:
    draft: CampaignDraft
    usage: int
    usage_recorded: bool
    reset_occurred: bool
    run: GenerationRun


class GenerationOrchestrator:
    """Sequence authentication, quota, generation and usage bookkeeping."""

    def __init__(
        self,
        identity_resolver: IdentityResolver,
        profile_store: ProfileStore,
        generation_client: CampaignGenerationClient,
        *,
        plan_limits: Mapping[PlanTier, int] = PLAN_LIMITS,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.identity_resolver = identity_resolver
        self.profile_store = profile_store
        self.generation_client = generation_client
        self.plan_limits = plan_limits
        self.clock = clock

    def _transition(self, run: GenerationRun, state: GenerationState) -> None:
        run.state = state
        run.history.append(state)
        log_event(
            "info",
            "generation.state",
            request_id=run.request_id,
            user_id=run.identity.user_id if run.identity else None,
            event_type=state.value,
        )

    def _fail(self, run: GenerationRun, exc: AppError) -> AppError:
        failed_in = run.state
        run.error_code = exc.code
        run.state = GenerationState.ERRORED
        run.history.append(GenerationState.ERRORED)
        log_event(
            "warning" if exc.status_code < 500 else "error",
            "generation.errored",
            request_id=run.request_id,
            user_id=run.identity.user_id if run.identity else None,
            error_code=exc.code,
            extra={"failed_in": failed_in.value},
        )
        if exc.request_id is None:
            exc.request_id = run.request_id
        return exc

    def run(
        self,
        prompt: Optional[str],
        authorization: Optional[str],
        *,
        request_id: Optional[str] = None,
    ) -> GenerationOutcome:
        """
        Handle one generation request.

        Raises:
            MissingPromptError: Empty prompt (checked before anything else)
            UnauthenticatedError: Credential missing or invalid
            ProfileUnavailableError: Profile missing or store unreachable
            QuotaExceededError: Plan allowance used up for this month
            GenerationFailedError: Generator failed; usage untouched
        """
        run = GenerationRun(request_id=request_id)

        if prompt is None or not prompt.strip():
            raise self._fail(run, MissingPromptError("Please describe your business to generate a campaign."))

        self._transition(run, GenerationState.AUTHENTICATING)
        try:
            run.identity = self.identity_resolver.resolve_identity(authorization)
        except AppError as exc:
            raise self._fail(run, exc)

        self._transition(run, GenerationState.PROFILE_LOADING)
        try:
            run.profile = self.profile_store.load_profile(run.identity.user_id)
        except AppError as exc:
            raise self._fail(run, exc)

        self._transition(run, GenerationState.QUOTA_CHECKING)
        now = self.clock()
        run.decision = evaluate(now, run.profile, self.plan_limits)

        if run.decision.reset_occurred:
            try:
                applied = self.profile_store.persist_reset(run.identity.user_id, now)
            except PersistenceFailedError as exc:
                # Counting on top of last month's total would overcharge the user
                log_event(
                    "error",
                    "generation.reset_failed",
                    request_id=run.request_id,
                    user_id=run.identity.user_id,
                    error_code=exc.code,
                    extra={"reason": exc.message},
                )
                raise self._fail(
                    run,
                    ProfileUnavailableError("We couldn't update your monthly allowance. Please try again shortly."),
                )
            log_event(
                "info",
                "quota.window_reset",
                request_id=run.request_id,
                user_id=run.identity.user_id,
                extra={"applied": applied, "previous_usage": run.profile.generations_used},
            )

        if not run.decision.allowed:
            raise self._fail(
                run,
                QuotaExceededError(
                    "You've reached your plan's monthly generation limit. Upgrade your plan to keep generating."
                ),
            )

        self._transition(run, GenerationState.GENERATING)
        try:
            draft = self.generation_client.generate(prompt)
        except GenerationError as exc:
            log_event(
                "error",
                "generation.upstream_failed",
                request_id=run.request_id,
                user_id=run.identity.user_id,
                error_code="generation_failed",
                extra={"reason": exc.reason, "detail": exc.detail},
            )
            raise self._fail(
                run,
                GenerationFailedError("We couldn't generate your campaign. Please try again or adjust your description."),
            )

        self._transition(run, GenerationState.PERSISTING)
        usage = run.decision.usage + 1
        usage_recorded = True
        try:
            usage = self.profile_store.increment_usage(run.identity.user_id)
        except PersistenceFailedError as exc:
            usage_recorded = False
            log_event(
                "error",
                "usage.persist_failed",
                request_id=run.request_id,
                user_id=run.identity.user_id,
                error_code=exc.code,
                extra={
                    "pending_increment": 1,
                    "expected_usage": usage,
                    "plan": run.profile.plan.value,
                    "reason": exc.message,
                },
            )

        self._transition(run, GenerationState.COMPLETED)
        return GenerationOutcome(
            draft=draft,
            usage=usage,
            usage_recorded=usage_recorded,
            reset_occurred=run.decision.reset_occurred,
            run=run,
        )


_orchestrator: Optional[GenerationOrchestrator] = None


def get_generation_orchestrator() -> GenerationOrchestrator:
    """FastAPI dependency returning the process-wide orchestrator."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = GenerationOrchestrator(
            get_identity_resolver(),
            profile_store,
            CampaignGenerationClient.from_settings(),
        )
    return _orchestrator
