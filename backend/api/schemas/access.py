"""
Access payload attached to every gated content response.
"""

from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator

from core.access import AccessDecision
from core.domain.subscription import normalize_tier_name


def _require_known_tier(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    canonical = normalize_tier_name(v)
    if canonical is None:
        raise ValueError(f"Unknown tier '{v}'. Expected Explorer, Builder or Innovator")
    return canonical


def _display_tier(v: Optional[str]) -> Optional[str]:
    # Unknown stored values pass through unchanged
    if isinstance(v, str):
        return normalize_tier_name(v) or v
    return v


# Request fields: must be a known tier (aliases accepted and normalized)
TierName = Annotated[Optional[str], AfterValidator(_require_known_tier)]
RequiredTierName = Annotated[str, AfterValidator(_require_known_tier)]

# Response field: aliases normalized, anything else shown as stored
StoredTier = Annotated[Optional[str], BeforeValidator(_display_tier)]


class AccessInfo(BaseModel):
    """How the client should render an item for the caller."""

    state: str
    required_tier: str
    current_tier: Optional[str] = None
    message: Optional[str] = None
    action: Optional[str] = None
    action_label: Optional[str] = None
    action_url: Optional[str] = None

    @classmethod
    def from_decision(cls, decision: AccessDecision) -> "AccessInfo":
        return cls(
            state=decision.state.value,
            required_tier=decision.required_tier.value,
            current_tier=decision.current_tier.value if decision.current_tier else None,
            message=decision.message,
            action=decision.action.value if decision.action else None,
            action_label=decision.action_label,
            action_url=decision.action_url,
        )
