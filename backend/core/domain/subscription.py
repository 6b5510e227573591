"""Subscription tier domain."""
from enum import Enum
from typing import Optional


class Tier(str, Enum):
    """Subscription tiers, declared lowest first."""

    EXPLORER = "Explorer"
    BUILDER = "Builder"
    INNOVATOR = "Innovator"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    @classmethod
    def lowest(cls) -> "Tier":
        return cls.EXPLORER

    @classmethod
    def parse(cls, name: Optional[str]) -> Optional["Tier"]:
        """Exact-match lookup that also accepts legacy aliases.

        Returns None for an unrecognised name; callers decide whether that is
        an error or a fallback to the lowest tier.
        """
        if name is None:
            return None
        if isinstance(name, Tier):
            return name
        try:
            return cls(name)
        except ValueError:
            return TIER_ALIASES.get(name)

    def __lt__(self, other: "Tier") -> bool:
        if not isinstance(other, Tier):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: "Tier") -> bool:
        if not isinstance(other, Tier):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: "Tier") -> bool:
        if not isinstance(other, Tier):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: "Tier") -> bool:
        if not isinstance(other, Tier):
            return NotImplemented
        return self.rank >= other.rank


_RANKS = {tier: index for index, tier in enumerate(Tier)}

# "Voyager" was used for the middle tier in some older screens and rows
TIER_ALIASES: dict[str, Tier] = {
    "Voyager": Tier.BUILDER,
}


def normalize_tier_name(name: Optional[str]) -> Optional[str]:
    """Canonical spelling of a known tier name, or None if unknown/empty."""
    if not name:
        return None
    tier = Tier.parse(name)
    return tier.value if tier else None
