"""
Process-wide cache of resolved principals.

A principal (admin flag + subscription tier) is loaded from the store the
first time a user is seen and reused until something invalidates it. The
triggers are: login, logout, an explicit session refresh, and the user's own
plan upgrade. Changes made to a user's rows by anyone else are not visible
until one of those happens.

Usage::

    from services.principal_cache import principal_cache

    principal = await principal_cache.get_or_load(user_id, loader)
    principal_cache.invalidate(user_id)
"""

import logging
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any, Optional

from core.access import resolve_tier
from core.domain.content import Collection
from core.domain.subscription import Tier
from core.domain.user import Principal
from core.exceptions import StoreError
from core.interfaces.repositories import ContentStore, Filter
from infrastructure.config.settings import settings

logger = logging.getLogger(__name__)

PrincipalLoader = Callable[[str], Awaitable[Optional[Principal]]]


class PrincipalCache:
    """
    In-memory principal cache keyed by user id, least recently used first out.

    Every invalidation bumps a version counter. A load that was in flight
    while the counter moved returns its result to its caller but does not
    store it, so an invalidated principal is never written back.
    """

    def __init__(self, max_entries: int = 10_000) -> None:
        self._entries: OrderedDict[str, Principal] = OrderedDict()
        self._max_entries = max_entries
        self._version = 0

    def get(self, user_id: str) -> Optional[Principal]:
        principal = self._entries.get(user_id)
        if principal is not None:
            self._entries.move_to_end(user_id)
        return principal

    def put(self, principal: Principal) -> None:
        if principal.user_id is None:
            return
        self._entries[principal.user_id] = principal
        self._entries.move_to_end(principal.user_id)
        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)

    async def get_or_load(self, user_id: str, loader: PrincipalLoader) -> Optional[Principal]:
        """
        Cached principal for ``user_id``, loading it on a miss.

        A loader returning None (user gone or inactive) is not cached.
        """
        cached = self.get(user_id)
        if cached is not None:
            return cached

        version = self._version
        principal = await loader(user_id)
        if principal is not None and version == self._version:
            self.put(principal)
        return principal

    def invalidate(self, user_id: str) -> None:
        self._version += 1
        if self._entries.pop(user_id, None) is not None:
            logger.debug("Principal cache invalidated for user %s", user_id)

    def clear(self) -> None:
        self._version += 1
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


principal_cache = PrincipalCache(max_entries=settings.principal_cache_max_entries)


def _as_aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


async def get_active_subscription(store: ContentStore, user_id: str) -> Optional[Any]:
    """Newest active subscription whose expiry (if any) is in the future."""
    rows = await store.select(
        Collection.SUBSCRIPTIONS,
        filters=[Filter.eq("user_id", user_id), Filter.eq("status", "active")],
        order_by="created_at",
        descending=True,
    )
    now = datetime.now(UTC)
    for row in rows:
        if row.expires_at is None or _as_aware(row.expires_at) > now:
            return row
    return None


async def load_principal(
    store: ContentStore, user_id: str, strict_tiers: bool = False
) -> Optional[Principal]:
    """
    Build a principal from the user's profile and active subscription.

    Returns None if the user does not exist or is not active. A failed
    subscription lookup is logged and yields a principal with no tier.
    """
    user = await store.get(Collection.PROFILES, user_id)
    if user is None or not user.is_active:
        return None

    tier: Optional[Tier] = None
    try:
        subscription = await get_active_subscription(store, user_id)
    except StoreError as e:
        logger.error("Subscription lookup failed for user %s: %s", user_id, e.message)
        subscription = None
    if subscription is not None:
        tier = resolve_tier(subscription.tier, strict=strict_tiers)

    return Principal(
        user_id=user.id,
        authenticated=True,
        is_admin=bool(user.is_admin),
        tier=tier,
    )
