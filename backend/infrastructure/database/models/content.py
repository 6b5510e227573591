"""
Gated content models: questions, coding questions, system design problems
and portfolio projects.

Every item carries a ``tier``; NULL means open to the lowest tier.
"""

from typing import Optional

from sqlalchemy import JSON, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from core.domain.subscription import Tier

from .base import Base, TimestampMixin, uuid_pk


def _tier_column() -> Mapped[Optional[str]]:
    return mapped_column(String(50), default=Tier.EXPLORER.value, nullable=True, index=True)


def _created_by_column() -> Mapped[Optional[str]]:
    return mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )


class Question(Base, TimestampMixin):
    """Interview question with its model answer."""

    __tablename__ = "questions"

    id: Mapped[str] = uuid_pk()
    subcategory_id: Mapped[Optional[str]] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("subcategories.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    answer: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(100), nullable=False)
    level: Mapped[str] = mapped_column(String(50), nullable=False)
    tier: Mapped[Optional[str]] = _tier_column()
    created_by: Mapped[Optional[str]] = _created_by_column()

    __table_args__ = (Index("ix_questions_subcategory_created", "subcategory_id", "created_at"),)

    def __repr__(self) -> str:
        return f"<Question(id={self.id}, title={self.title[:30]})>"


class CodingQuestion(Base, TimestampMixin):
    """Coding problem with a written solution."""

    __tablename__ = "coding_questions"

    id: Mapped[str] = uuid_pk()
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    slug: Mapped[str] = mapped_column(String(500), unique=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    difficulty: Mapped[str] = mapped_column(String(50), default="Easy", nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    tags: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    tier: Mapped[Optional[str]] = _tier_column()
    solution: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    video_link: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    github_link: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    status: Mapped[str] = mapped_column(String(50), default="Published", nullable=False)
    created_by: Mapped[Optional[str]] = _created_by_column()

    def __repr__(self) -> str:
        return f"<CodingQuestion(slug={self.slug})>"


class SystemDesignProblem(Base, TimestampMixin):
    """System design write-up: requirements discussion plus solution."""

    __tablename__ = "system_design_problems"

    id: Mapped[str] = uuid_pk()
    category_id: Mapped[Optional[str]] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    slug: Mapped[str] = mapped_column(String(500), unique=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    requirement_discussion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    solution: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    design_image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    video_link: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    github_link: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    tags: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    difficulty: Mapped[str] = mapped_column(String(50), default="Medium", nullable=False)
    tier: Mapped[Optional[str]] = _tier_column()
    status: Mapped[str] = mapped_column(String(50), default="Published", nullable=False)

    def __repr__(self) -> str:
        return f"<SystemDesignProblem(slug={self.slug})>"


class Project(Base, TimestampMixin):
    """Portfolio project brief."""

    __tablename__ = "projects"

    id: Mapped[str] = uuid_pk()
    category_id: Mapped[Optional[str]] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(100), nullable=False)
    difficulty: Mapped[str] = mapped_column(String(50), default="Beginner", nullable=False)
    duration: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    github_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    key_features: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    technologies: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    tier: Mapped[Optional[str]] = _tier_column()
    created_by: Mapped[Optional[str]] = _created_by_column()

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, title={self.title[:30]})>"
