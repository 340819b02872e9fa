"""Cache tables for USPTO search and transaction responses

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── search_cache ──────────────────────────────────────────────────────────
    op.create_table(
        "search_cache",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("query_hash", sa.String(32), nullable=False, unique=True),
        sa.Column("search_query", sa.Text, nullable=False),
        sa.Column("result_data", sa.JSON, nullable=False),
        sa.Column("fetched_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_search_cache_expires_at", "search_cache", ["expires_at"])

    # ── transaction_cache ─────────────────────────────────────────────────────
    op.create_table(
        "transaction_cache",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("application_number", sa.String(20), nullable=False, unique=True),
        sa.Column("transaction_data", sa.JSON, nullable=False),
        sa.Column("fetched_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_transaction_cache_expires_at", "transaction_cache", ["expires_at"])


def downgrade() -> None:
    op.drop_index("ix_transaction_cache_expires_at", table_name="transaction_cache")
    op.drop_table("transaction_cache")
    op.drop_index("ix_search_cache_expires_at", table_name="search_cache")
    op.drop_table("search_cache")
