# Domain Entities
# Pure business objects with no external dependencies
from .content import Collection, ContentType, slugify
from .subscription import TIER_ALIASES, Tier, normalize_tier_name
from .user import Principal

__all__ = [
    "Collection",
    "ContentType",
    "Principal",
    "TIER_ALIASES",
    "Tier",
    "normalize_tier_name",
    "slugify",
]
