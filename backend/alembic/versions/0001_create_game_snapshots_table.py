"""Create game snapshots table."""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_create_game_snapshots_table"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "game_snapshots",
        sa.Column("session_id", sa.String(length=64), primary_key=True, nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("phase", sa.String(length=32), nullable=False),
        sa.Column("current_round", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("state", sa.JSON(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            onupdate=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_game_snapshots_phase", "game_snapshots", ["phase"])


def downgrade() -> None:
    op.drop_index("ix_game_snapshots_phase", table_name="game_snapshots")
    op.drop_table("game_snapshots")
