"""Initial schema: users, subscriptions, catalogue, content and audit log

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def _tier() -> sa.Column:
    return sa.Column("tier", sa.String(length=50), nullable=True, server_default="Explorer")


def _created_by() -> sa.Column:
    return sa.Column(
        "created_by",
        postgresql.UUID(as_uuid=False),
        sa.ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("username", sa.String(length=50), nullable=True),
        sa.Column("first_name", sa.String(length=100), nullable=True),
        sa.Column("last_name", sa.String(length=100), nullable=True),
        sa.Column("avatar_url", sa.String(length=500), nullable=True),
        sa.Column("phone", sa.String(length=30), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="active"),
        sa.Column("password_changed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.Column("login_count", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
        sa.UniqueConstraint("username"),
    )
    op.create_index("ix_users_email", "users", ["email"])

    op.create_table(
        "user_subscriptions",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("tier", sa.String(length=50), nullable=False, server_default="Explorer"),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="active"),
        sa.Column(
            "billing_interval", sa.String(length=20), nullable=False, server_default="monthly"
        ),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_subscriptions_user_id", "user_subscriptions", ["user_id"])
    op.create_index(
        "ix_user_subscriptions_user_status", "user_subscriptions", ["user_id", "status"]
    )

    op.create_table(
        "categories",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        _tier(),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "subcategories",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("category_id", postgresql.UUID(as_uuid=False), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        _tier(),
        *_timestamps(),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_subcategories_category_id", "subcategories", ["category_id"])

    op.create_table(
        "questions",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("subcategory_id", postgresql.UUID(as_uuid=False), nullable=True),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("answer", sa.Text(), nullable=False),
        sa.Column("type", sa.String(length=100), nullable=False),
        sa.Column("level", sa.String(length=50), nullable=False),
        _tier(),
        _created_by(),
        *_timestamps(),
        sa.ForeignKeyConstraint(["subcategory_id"], ["subcategories.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_questions_subcategory_id", "questions", ["subcategory_id"])
    op.create_index("ix_questions_tier", "questions", ["tier"])
    op.create_index(
        "ix_questions_subcategory_created", "questions", ["subcategory_id", "created_at"]
    )

    op.create_table(
        "coding_questions",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("slug", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("difficulty", sa.String(length=50), nullable=False, server_default="Easy"),
        sa.Column("category", sa.String(length=255), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False, server_default="[]"),
        _tier(),
        sa.Column("solution", sa.Text(), nullable=True),
        sa.Column("video_link", sa.String(length=500), nullable=True),
        sa.Column("github_link", sa.String(length=500), nullable=True),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="Published"),
        _created_by(),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )
    op.create_index("ix_coding_questions_category", "coding_questions", ["category"])
    op.create_index("ix_coding_questions_tier", "coding_questions", ["tier"])

    op.create_table(
        "system_design_problems",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("category_id", postgresql.UUID(as_uuid=False), nullable=True),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("slug", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("requirement_discussion", sa.Text(), nullable=True),
        sa.Column("solution", sa.Text(), nullable=True),
        sa.Column("design_image", sa.String(length=500), nullable=True),
        sa.Column("video_link", sa.String(length=500), nullable=True),
        sa.Column("github_link", sa.String(length=500), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False, server_default="[]"),
        sa.Column("difficulty", sa.String(length=50), nullable=False, server_default="Medium"),
        _tier(),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="Published"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )
    op.create_index(
        "ix_system_design_problems_category_id", "system_design_problems", ["category_id"]
    )
    op.create_index("ix_system_design_problems_tier", "system_design_problems", ["tier"])

    op.create_table(
        "projects",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("category_id", postgresql.UUID(as_uuid=False), nullable=True),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", sa.String(length=100), nullable=False),
        sa.Column("difficulty", sa.String(length=50), nullable=False, server_default="Beginner"),
        sa.Column("duration", sa.String(length=100), nullable=True),
        sa.Column("github_url", sa.String(length=500), nullable=True),
        sa.Column("key_features", sa.JSON(), nullable=False, server_default="[]"),
        sa.Column("technologies", sa.JSON(), nullable=False, server_default="[]"),
        _tier(),
        _created_by(),
        *_timestamps(),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_projects_category_id", "projects", ["category_id"])
    op.create_index("ix_projects_tier", "projects", ["tier"])

    op.create_table(
        "admin_audit_logs",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("admin_user_id", postgresql.UUID(as_uuid=False), nullable=True),
        sa.Column("action", sa.String(length=100), nullable=False),
        sa.Column("target_type", sa.String(length=50), nullable=False),
        sa.Column("target_id", postgresql.UUID(as_uuid=False), nullable=True),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column("ip_address", sa.String(length=45), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["admin_user_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_admin_audit_logs_admin_user_id", "admin_audit_logs", ["admin_user_id"])
    op.create_index("ix_admin_audit_logs_action", "admin_audit_logs", ["action"])
    op.create_index("ix_admin_audit_logs_target_type", "admin_audit_logs", ["target_type"])
    op.create_index("ix_admin_audit_admin_action", "admin_audit_logs", ["admin_user_id", "action"])
    op.create_index("ix_admin_audit_target", "admin_audit_logs", ["target_type", "target_id"])
    op.create_index("ix_admin_audit_created", "admin_audit_logs", ["created_at"])


def downgrade() -> None:
    op.drop_table("admin_audit_logs")
    op.drop_table("projects")
    op.drop_table("system_design_problems")
    op.drop_table("coding_questions")
    op.drop_table("questions")
    op.drop_table("subcategories")
    op.drop_table("categories")
    op.drop_table("user_subscriptions")
    op.drop_table("users")
