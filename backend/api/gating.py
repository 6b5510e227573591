"""
Server-side gating of content responses.

Every content item is rendered through ``render_item`` so the access payload
is computed per request and locked bodies never leave the server.
"""

from typing import Any, Sequence, TypeVar

from core.access import evaluate_access
from core.domain.user import Principal
from infrastructure.config.settings import settings

from .schemas.access import AccessInfo
from .schemas.content import GatedResponse
from .utils import total_pages

T = TypeVar("T", bound=GatedResponse)


def render_item(obj: Any, schema: type[T], principal: Principal) -> T:
    """Serialize ``obj`` with ``schema``, nulling gated fields if locked."""
    decision = evaluate_access(
        principal,
        obj.tier,
        sign_in_url=settings.sign_in_url,
        pricing_url=settings.pricing_url,
        strict=settings.strict_tier_names,
    )
    item = schema.model_validate(obj)
    update: dict[str, Any] = {"access": AccessInfo.from_decision(decision)}
    if not decision.visible:
        update.update({name: None for name in schema.GATED_FIELDS})
    return item.model_copy(update=update)


def render_page(
    rows: Sequence[Any],
    schema: type[T],
    principal: Principal,
    total: int,
    page: int,
    page_size: int,
) -> dict:
    return {
        "items": [render_item(row, schema, principal) for row in rows],
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": total_pages(total, page_size),
    }
