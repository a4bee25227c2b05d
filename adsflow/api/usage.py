"""Usage API: the caller's plan and monthly generation usage."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request

from adsflow.core.auth import require_identity
from adsflow.core.logging import get_request_id
from adsflow.features.profiles.store import ProfileStore, get_profile_store
from adsflow.features.quota.engine import evaluate, month_start
from adsflow.models.profile import Identity

router = APIRouter(prefix="/v1", tags=["usage"])


@router.get("/usage")
def get_usage(
    request: Request,
    identity: Identity = Depends(require_identity),
    store: ProfileStore = Depends(get_profile_store),
):
    """Plan, allowance and usage for the current month.

    A pending month rollover is reflected in the numbers but not written;
    the next generation request persists it.
    """
    rid = getattr(request.state, "request_id", None) or get_request_id()
    now = datetime.now(timezone.utc)
    profile = store.load_profile(identity.user_id)
    decision = evaluate(now, profile)

    window_start = month_start(now) if decision.reset_occurred else profile.generation_reset_date
    return {
        "data": {
            "plan": profile.plan.value,
            "generations_used": decision.usage,
            "limit": "unlimited" if decision.unlimited else decision.limit,
            "remaining": "unlimited" if decision.unlimited else decision.remaining,
            "can_generate": decision.allowed,
            "window_started_at": window_start.isoformat(),
        },
        "request_id": rid,
    }
