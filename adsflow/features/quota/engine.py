"""
adsflow/features/quota/engine.py

Monthly generation quota decisions.

Pure functions only: the caller supplies ``now``, the profile and the plan
limits, and is responsible for persisting a reset and for incrementing
usage after a successful generation.

Windows follow UTC calendar months. A window rolls over when ``now`` is in
a later year than the reset date, or in the same year and a later month.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Mapping, Optional

from adsflow.models.profile import PLAN_LIMITS, UNLIMITED, PlanTier, UsageProfile


@dataclass(frozen=True)
class QuotaDecision:
    usage: int
    allowed: bool
    reset_occurred: bool
    limit: int

    @property
    def unlimited(self) -> bool:
        return self.limit == UNLIMITED

    @property
    def remaining(self) -> Optional[int]:
        """Generations left in the window, None when unlimited."""
        if self.unlimited:
            return None
        return max(0, self.limit - self.usage)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def window_rolled_over(now: datetime, reset_date: datetime) -> bool:
    """Year first, then month within the same year."""
    now = as_utc(now)
    reset_date = as_utc(reset_date)
    if now.year > reset_date.year:
        return True
    return now.year == reset_date.year and now.month > reset_date.month


def month_start(now: datetime) -> datetime:
    """First instant of ``now``'s UTC calendar month."""
    now = as_utc(now)
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def limit_for(plan: PlanTier, limits: Mapping[PlanTier, int] = PLAN_LIMITS) -> int:
    # Unknown plans get the free allowance
    if plan in limits:
        return limits[plan]
    return limits.get(PlanTier.FREE, PLAN_LIMITS[PlanTier.FREE])


def evaluate(
    now: datetime,
    profile: UsageProfile,
    limits: Mapping[PlanTier, int] = PLAN_LIMITS,
) -> QuotaDecision:
    """Decide whether ``profile`` may run one more generation at ``now``."""
    reset_occurred = window_rolled_over(now, profile.generation_reset_date)
    usage = 0 if reset_occurred else profile.generations_used
    limit = limit_for(profile.plan, limits)

    if limit == UNLIMITED:
        allowed = True
    else:
        allowed = usage < limit

    return QuotaDecision(
        usage=usage,
        allowed=allowed,
        reset_occurred=reset_occurred,
        limit=limit,
    )
