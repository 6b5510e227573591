"""
Admin content moderation schemas.
"""

from typing import Literal

from pydantic import BaseModel, Field

from core.domain.content import ContentType


class BulkDeleteRequest(BaseModel):
    """Request to bulk delete content."""

    content_type: ContentType = Field(..., description="Type of content to delete")
    ids: list[str] = Field(
        ..., min_length=1, max_length=100, description="List of content IDs to delete (max 100)"
    )
    confirm: Literal[True] = Field(..., description="Must be true to confirm the deletion")


class BulkDeleteResponse(BaseModel):
    """Response from bulk delete operation."""

    success: bool
    deleted_count: int
    message: str
