"""Principal: the identity an access decision is made for."""
from dataclasses import dataclass
from typing import Optional

from .subscription import Tier


@dataclass(frozen=True)
class Principal:
    """Resolved per request from the session.

    ``tier`` is None when the user has no active subscription record; access
    checks treat that exactly like the lowest tier.
    """

    user_id: Optional[str] = None
    authenticated: bool = False
    is_admin: bool = False
    tier: Optional[Tier] = None

    @classmethod
    def anonymous(cls) -> "Principal":
        return cls()

    @property
    def effective_tier(self) -> Tier:
        return self.tier or Tier.lowest()
