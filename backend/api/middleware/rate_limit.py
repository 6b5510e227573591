"""
Rate limiting using slowapi.

Limits are keyed on the client IP. Storage is Redis when REDIS_URL is set,
otherwise per-process memory.

Rate Limits:
- Login: 5 attempts per minute
- Registration: 3 attempts per minute
- Token refresh / password change: 5 per minute
- Bulk import: 10 per minute
- Default: 100 requests per minute
"""

import ipaddress
import logging

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from infrastructure.config.settings import settings

logger = logging.getLogger(__name__)

RATE_LIMITS = {
    "login": "5/minute",
    "register": "3/minute",
    "refresh": "5/minute",
    "password_change": "5/minute",
    "import": "10/minute",
    "default": "100/minute",
}


def _public_ip(value: str) -> str | None:
    """``value`` if it parses as a public IP address, else None.

    Private and loopback entries in forwarding headers are ignored because a
    client can set them freely.
    """
    try:
        addr = ipaddress.ip_address(value.strip())
    except ValueError:
        return None
    if addr.is_private or addr.is_loopback or addr.is_link_local:
        return None
    return str(addr)


def get_client_ip(request: Request) -> str:
    """Client IP from X-Forwarded-For / X-Real-IP, falling back to the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        ip = _public_ip(forwarded.split(",")[0])
        if ip:
            return ip
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        ip = _public_ip(real_ip)
        if ip:
            return ip
    return get_remote_address(request)


_storage_uri = settings.redis_url or "memory://"

if not settings.redis_url:
    logger.warning("Rate limiter using in-memory storage; limits are per process")
    if settings.is_production:
        logger.critical("REDIS_URL is not set in production; rate limits are not shared across workers")

limiter = Limiter(
    key_func=get_client_ip,
    storage_uri=_storage_uri,
    default_limits=[RATE_LIMITS["default"]],
)


def get_rate_limit(endpoint: str) -> str:
    """Limit string for ``endpoint``, or the default."""
    return RATE_LIMITS.get(endpoint, RATE_LIMITS["default"])
