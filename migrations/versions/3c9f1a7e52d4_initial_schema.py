"""initial schema: drops, streaks, config

Revision ID: 3c9f1a7e52d4
Revises:
Create Date: 2026-10-16 12:00:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c9f1a7e52d4"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the ledger, streak and config tables."""
    op.create_table(
        "drops",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("device_hash", sa.String(length=64), nullable=False),
        sa.Column("mode", sa.String(length=16), nullable=False),
        sa.Column("char_count", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.CheckConstraint("mode IN ('type', 'speak', 'draw')", name="ck_drops_mode"),
        sa.CheckConstraint("char_count >= 0", name="ck_drops_char_count"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_drops_created_at", "drops", ["created_at"])
    op.create_index("ix_drops_day", "drops", ["day"])
    op.create_index("ix_drops_device_day", "drops", ["device_hash", "day"])

    op.create_table(
        "streaks",
        sa.Column("device_hash", sa.String(length=64), nullable=False),
        sa.Column("current_streak", sa.Integer(), nullable=False),
        sa.Column("longest_streak", sa.Integer(), nullable=False),
        sa.Column("last_drop_date", sa.Date(), nullable=True),
        sa.CheckConstraint("current_streak >= 0", name="ck_streaks_current"),
        sa.CheckConstraint("longest_streak >= current_streak", name="ck_streaks_longest"),
        sa.PrimaryKeyConstraint("device_hash"),
    )

    op.create_table(
        "config",
        sa.Column("key", sa.String(length=128), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("key"),
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("config")
    op.drop_table("streaks")
    op.drop_index("ix_drops_device_day", table_name="drops")
    op.drop_index("ix_drops_day", table_name="drops")
    op.drop_index("ix_drops_created_at", table_name="drops")
    op.drop_table("drops")
