"""Add search history, popular search and search analytics tables.

Revision ID: 0002
Revises: 0001
Create Date: 2025-06-16
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa


revision: str = "0002"
down_revision: str | None = "0001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "search_history",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("search_term", sa.String(500), nullable=False),
        sa.Column("filters", sa.JSON(), nullable=True),
        sa.Column("result_count", sa.Integer(), nullable=False, default=0),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_search_history_user_id", "search_history", ["user_id"])
    op.create_index("ix_search_history_created_at", "search_history", ["created_at"])

    # The unique index backs the ON CONFLICT upsert of search counters
    op.create_table(
        "popular_searches",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("search_term", sa.String(500), nullable=False),
        sa.Column("search_count", sa.Integer(), nullable=False, default=1),
        sa.Column("last_searched", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_popular_searches_search_term",
        "popular_searches",
        ["search_term"],
        unique=True,
    )

    op.create_table(
        "search_analytics",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("search_term", sa.String(500), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=True),
        sa.Column("result_count", sa.Integer(), nullable=False, default=0),
        sa.Column("clicked_project_id", sa.String(36), nullable=True),
        sa.Column("click_position", sa.Integer(), nullable=True),
        sa.Column("session_id", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_search_analytics_user_id", "search_analytics", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_search_analytics_user_id", table_name="search_analytics")
    op.drop_table("search_analytics")
    op.drop_index("ix_popular_searches_search_term", table_name="popular_searches")
    op.drop_table("popular_searches")
    op.drop_index("ix_search_history_created_at", table_name="search_history")
    op.drop_index("ix_search_history_user_id", table_name="search_history")
    op.drop_table("search_history")
