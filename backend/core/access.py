"""
Tier-based access control.

Decides whether a principal may see a content item and, when not, what the
client should show instead. Denial is a normal outcome expressed as an
``AccessDecision``; nothing here raises for it.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .domain.subscription import Tier
from .domain.user import Principal
from .exceptions import UnknownTierError

logger = logging.getLogger(__name__)

TierLike = Union[Tier, str, None]


class AccessState(str, Enum):
    VISIBLE = "visible"
    SIGN_IN_REQUIRED = "sign_in_required"
    UPGRADE_REQUIRED = "upgrade_required"


class AccessAction(str, Enum):
    SIGN_IN = "sign_in"
    UPGRADE = "upgrade"


@dataclass(frozen=True)
class AccessDecision:
    state: AccessState
    required_tier: Tier
    current_tier: Optional[Tier] = None
    message: Optional[str] = None
    action: Optional[AccessAction] = None
    action_label: Optional[str] = None
    action_url: Optional[str] = None

    @property
    def visible(self) -> bool:
        return self.state is AccessState.VISIBLE


def resolve_tier(tier: TierLike, strict: bool = False) -> Tier:
    """Map a tier name (or None) to a Tier.

    None and empty strings are the lowest tier. An unrecognised name is a data
    problem: it is logged and treated as the lowest tier, or raises
    UnknownTierError when ``strict`` is set.
    """
    if tier is None or tier == "":
        return Tier.lowest()
    resolved = Tier.parse(tier)
    if resolved is not None:
        return resolved
    if strict:
        raise UnknownTierError(str(tier))
    logger.warning("Unknown tier name %r; treating as %s", tier, Tier.lowest().value)
    return Tier.lowest()


def resolve_tier_rank(tier_name: TierLike, strict: bool = False) -> int:
    return resolve_tier(tier_name, strict=strict).rank


def has_access(principal: Principal, required_tier: TierLike, strict: bool = False) -> bool:
    """Admins always pass; everyone else needs a rank >= the required rank."""
    if principal.is_admin:
        return True
    return principal.effective_tier.rank >= resolve_tier_rank(required_tier, strict=strict)


def evaluate_access(
    principal: Principal,
    required_tier: TierLike,
    *,
    sign_in_url: Optional[str] = None,
    pricing_url: Optional[str] = None,
    strict: bool = False,
) -> AccessDecision:
    """What the client should render for this principal and content tier."""
    required = resolve_tier(required_tier, strict=strict)

    if principal.is_admin:
        return AccessDecision(
            state=AccessState.VISIBLE,
            required_tier=required,
            current_tier=principal.tier,
        )

    if not principal.authenticated:
        return AccessDecision(
            state=AccessState.SIGN_IN_REQUIRED,
            required_tier=required,
            message="Please sign in to access this content",
            action=AccessAction.SIGN_IN,
            action_label="Sign In",
            action_url=sign_in_url,
        )

    if not has_access(principal, required, strict=strict):
        message = f"This content requires a {required.value} subscription or higher."
        if principal.tier is not None:
            message += f" Your current plan: {principal.tier.value}"
        return AccessDecision(
            state=AccessState.UPGRADE_REQUIRED,
            required_tier=required,
            current_tier=principal.tier,
            message=message,
            action=AccessAction.UPGRADE,
            action_label=f"Upgrade to {required.value}",
            action_url=pricing_url,
        )

    return AccessDecision(
        state=AccessState.VISIBLE,
        required_tier=required,
        current_tier=principal.tier,
    )
