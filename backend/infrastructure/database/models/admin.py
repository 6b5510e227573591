"""
Admin database models.
"""

from enum import Enum
from typing import Optional

from sqlalchemy import JSON, ForeignKey, Index, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, uuid_pk


class AuditAction(str, Enum):
    """Admin audit log action types."""

    # Catalogue
    CATEGORY_DELETED = "category_deleted"
    SUBCATEGORY_DELETED = "subcategory_deleted"
    CODING_CATEGORY_DELETED = "coding_category_deleted"

    # Content moderation
    CONTENT_CREATED = "content_created"
    CONTENT_UPDATED = "content_updated"
    CONTENT_DELETED = "content_deleted"
    BULK_DELETE_CONTENT = "bulk_delete_content"

    # Imports
    DATA_IMPORT = "data_import"


class AuditTargetType(str, Enum):
    """Admin audit log target types."""

    CATEGORY = "category"
    SUBCATEGORY = "subcategory"
    QUESTION = "question"
    CODING_QUESTION = "coding_question"
    CODING_CATEGORY = "coding_category"
    SYSTEM_DESIGN_PROBLEM = "system_design_problem"
    PROJECT = "project"
    SYSTEM = "system"


class AdminAuditLog(Base, TimestampMixin):
    """Admin audit log model for tracking administrative actions."""

    __tablename__ = "admin_audit_logs"

    id: Mapped[str] = uuid_pk()

    # Admin who performed the action
    admin_user_id: Mapped[Optional[str]] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    action: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    target_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    target_id: Mapped[Optional[str]] = mapped_column(UUID(as_uuid=False), nullable=True)

    # Additional context
    details: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    """
    Structure:
    {
        "count": 3,
        "ids": [...],
        "errors": [...]
    }
    """

    ip_address: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)  # IPv6 max length

    __table_args__ = (
        Index("ix_admin_audit_admin_action", "admin_user_id", "action"),
        Index("ix_admin_audit_target", "target_type", "target_id"),
        Index("ix_admin_audit_created", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<AdminAuditLog(id={self.id}, action={self.action}, admin_id={self.admin_user_id})>"
