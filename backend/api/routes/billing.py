"""
Billing API routes.

Plans are static; upgrades are simulated and take effect immediately with no
payment provider involved.
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Annotated

from fastapi import APIRouter, Depends

from core.domain.content import Collection
from core.domain.subscription import Tier
from core.exceptions import StoreError
from core.interfaces.repositories import ContentStore, Filter
from core.plans import BILLING_PERIOD_DAYS, PLANS
from infrastructure.database.models.user import SubscriptionStatus, User
from services.principal_cache import get_active_subscription, principal_cache
from api.dependencies import get_current_user, get_store
from api.schemas.billing import (
    PlanInfo,
    PlansResponse,
    SubscriptionResponse,
    UpgradeRequest,
)
from api.utils import store_failure

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/billing", tags=["Billing"])


def _subscription_response(subscription) -> SubscriptionResponse:
    if subscription is None:
        return SubscriptionResponse(
            tier=None,
            effective_tier=Tier.lowest().value,
            status="none",
        )
    tier = Tier.parse(subscription.tier)
    return SubscriptionResponse(
        tier=tier.value if tier else subscription.tier,
        effective_tier=(tier or Tier.lowest()).value,
        status=subscription.status,
        billing_interval=subscription.billing_interval,
        started_at=subscription.started_at,
        expires_at=subscription.expires_at,
    )


@router.get("/plans", response_model=PlansResponse)
async def get_plans():
    """All plans, lowest tier first."""
    return PlansResponse(
        plans=[PlanInfo(tier=tier.value, **PLANS[tier]) for tier in Tier]
    )


@router.get("/subscription", response_model=SubscriptionResponse)
async def get_subscription(
    current_user: Annotated[User, Depends(get_current_user)],
    store: ContentStore = Depends(get_store),
):
    """The caller's active subscription, read fresh from the database."""
    try:
        subscription = await get_active_subscription(store, current_user.id)
    except StoreError as e:
        raise store_failure("load subscription", e)
    return _subscription_response(subscription)


@router.post("/upgrade", response_model=SubscriptionResponse)
async def upgrade_subscription(
    body: UpgradeRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    store: ContentStore = Depends(get_store),
):
    """
    Switch the caller to ``body.tier``.

    Any active subscription is cancelled and a new one started in the same
    transaction. Explorer never expires; paid tiers run for one billing
    period. The caller's cached principal is dropped so the new tier applies
    to the very next request.
    """
    tier = Tier(body.tier)
    now = datetime.now(UTC)
    expires_at = None
    if tier != Tier.lowest():
        expires_at = now + timedelta(days=BILLING_PERIOD_DAYS[body.billing_interval])

    try:
        async with store.transaction():
            current = await store.select(
                Collection.SUBSCRIPTIONS,
                filters=[
                    Filter.eq("user_id", current_user.id),
                    Filter.eq("status", SubscriptionStatus.ACTIVE.value),
                ],
            )
            for row in current:
                await store.update_by_id(
                    Collection.SUBSCRIPTIONS,
                    row.id,
                    {"status": SubscriptionStatus.CANCELLED.value},
                )
            subscription = await store.insert_one(
                Collection.SUBSCRIPTIONS,
                {
                    "user_id": current_user.id,
                    "tier": tier.value,
                    "status": SubscriptionStatus.ACTIVE.value,
                    "billing_interval": body.billing_interval,
                    "started_at": now,
                    "expires_at": expires_at,
                },
            )
    except StoreError as e:
        raise store_failure("change plan", e)

    principal_cache.invalidate(current_user.id)
    logger.info("User %s switched to %s (%s)", current_user.id, tier.value, body.billing_interval)

    return _subscription_response(subscription)
