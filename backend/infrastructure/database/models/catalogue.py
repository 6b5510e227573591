"""
Category and subcategory models.
"""

from typing import Optional

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from core.domain.subscription import Tier

from .base import Base, TimestampMixin, uuid_pk


class Category(Base, TimestampMixin):
    """Top-level grouping (e.g. "Java", "System Design")."""

    __tablename__ = "categories"

    id: Mapped[str] = uuid_pk()
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tier: Mapped[Optional[str]] = mapped_column(
        String(50), default=Tier.EXPLORER.value, nullable=True
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name})>"


class Subcategory(Base, TimestampMixin):
    """Second-level grouping; holds interview questions."""

    __tablename__ = "subcategories"

    id: Mapped[str] = uuid_pk()
    category_id: Mapped[Optional[str]] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tier: Mapped[Optional[str]] = mapped_column(
        String(50), default=Tier.EXPLORER.value, nullable=True
    )

    def __repr__(self) -> str:
        return f"<Subcategory(id={self.id}, name={self.name})>"


class CodingCategory(Base, TimestampMixin):
    """Grouping for coding questions; questions refer to it by name."""

    __tablename__ = "coding_categories"

    id: Mapped[str] = uuid_pk()
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<CodingCategory(id={self.id}, name={self.name})>"
