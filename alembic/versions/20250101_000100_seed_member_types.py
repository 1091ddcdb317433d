"""Seed the fixed member types

Creates the two member types profiles can reference. Rows that already
exist are left alone, so the migration is safe to rerun.

Revision ID: 20250101_000100_seed_member_types
Revises: 20250101_000000_initial_schema
Create Date: 2025-01-01 00:01:00
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20250101_000100_seed_member_types"
down_revision: str | Sequence[str] | None = "20250101_000000_initial_schema"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

MEMBER_TYPES = (
    {"id": "basic", "discount": 2.3, "posts_limit_per_month": 20},
    {"id": "business", "discount": 7.7, "posts_limit_per_month": 100},
)


def upgrade() -> None:
    """Insert member types that are not present yet."""
    connection = op.get_bind()

    for member_type in MEMBER_TYPES:
        existing = connection.execute(
            sa.text("SELECT id FROM member_types WHERE id = :id"),
            {"id": member_type["id"]},
        ).fetchone()

        if existing is None:
            connection.execute(
                sa.text(
                    "INSERT INTO member_types (id, discount, posts_limit_per_month) "
                    "VALUES (:id, :discount, :posts_limit_per_month)"
                ),
                member_type,
            )


def downgrade() -> None:
    """Remove seeded member types that no profile references."""
    connection = op.get_bind()
    connection.execute(
        sa.text(
            "DELETE FROM member_types WHERE id IN ('basic', 'business') "
            "AND id NOT IN (SELECT member_type_id FROM profiles)"
        )
    )
