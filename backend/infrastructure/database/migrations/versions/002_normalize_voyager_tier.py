"""Rename the legacy Voyager tier to Builder

Rows written before the rename still say "Voyager". The application accepts
both names; this brings stored data onto the canonical one.

Revision ID: 002
Revises: 001
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

TIERED_TABLES = (
    "user_subscriptions",
    "categories",
    "subcategories",
    "questions",
    "coding_questions",
    "system_design_problems",
    "projects",
)


def upgrade() -> None:
    for table in TIERED_TABLES:
        op.execute(
            sa.text(f"UPDATE {table} SET tier = 'Builder' WHERE tier = 'Voyager'")
        )


def downgrade() -> None:
    # Rows that were Builder before the upgrade cannot be told apart; nothing to undo
    pass
