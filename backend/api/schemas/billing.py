"""
Plan and subscription schemas.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from .access import RequiredTierName


class PlanInfo(BaseModel):
    """One subscription plan."""

    tier: str = Field(..., description="Tier name (Explorer, Builder, Innovator)")
    name: str
    description: str
    price_monthly: int = Field(..., description="Monthly price in INR")
    price_yearly: int = Field(..., description="Yearly price in INR")
    currency: str
    features: list[str]
    popular: bool = False


class PlansResponse(BaseModel):
    plans: list[PlanInfo]


class SubscriptionResponse(BaseModel):
    """Caller's current plan; ``tier`` is None without an active subscription."""

    tier: Optional[str] = None
    effective_tier: str
    status: str = Field(..., description="active, cancelled, expired or none")
    billing_interval: Optional[str] = None
    started_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class UpgradeRequest(BaseModel):
    """Simulated plan change; no payment is taken."""

    tier: RequiredTierName
    billing_interval: Literal["monthly", "yearly"] = "monthly"

    model_config = {
        "json_schema_extra": {"example": {"tier": "Builder", "billing_interval": "monthly"}}
    }
