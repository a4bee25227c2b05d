"""
adsflow/models/profile.py

Usage profile and plan tiers.

Plans are set by the billing flow; this service only reads them.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict, Field


class PlanTier(str, Enum):
    FREE = "free"
    BUSINESS = "business"
    AGENCY = "agency"


UNLIMITED = -1

# Monthly generation allowance per plan; -1 means unlimited
PLAN_LIMITS: Dict[PlanTier, int] = {
    PlanTier.FREE: 2,
    PlanTier.BUSINESS: 15,
    PlanTier.AGENCY: UNLIMITED,
}


class Identity(BaseModel):
    """Authenticated caller as resolved from a bearer token."""
    model_config = ConfigDict(frozen=True)

    user_id: str
    email: Optional[str] = None


class UsageProfile(BaseModel):
    """
    UsageProfile: one per identity.

    generation_reset_date marks the start of the current counting window.
    generations_used only moves up by one after a successful generation,
    or back to zero when a new calendar month begins.
    """
    model_config = ConfigDict(frozen=True)

    user_id: str
    plan: PlanTier
    generations_used: int = Field(ge=0)
    generation_reset_date: datetime
