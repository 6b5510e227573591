"""
Shared API utility functions.
"""

import logging
from math import ceil

from fastapi import HTTPException, status

from core.exceptions import StoreError
from infrastructure.config import get_settings

logger = logging.getLogger(__name__)


def total_pages(total: int, page_size: int) -> int:
    return ceil(total / page_size) if total > 0 else 0


def store_failure(action: str, error: StoreError) -> HTTPException:
    """500 response for a failed store operation; ``action`` reads "create question"."""
    logger.error(f"Failed to {action}: {error.message}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}: {error.message}",
    )


def check_payload_size(text: str) -> None:
    """413 if an import payload is over the configured size."""
    limit = get_settings().import_max_payload_chars
    if len(text) > limit:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Import payload exceeds {limit} characters",
        )
