"""create board tables

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00

"""
from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "boards",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("pin_hash", sa.String(255), nullable=False),
        sa.Column(
            "last_activity_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        *_timestamps(),
    )
    op.create_index("ix_boards_name", "boards", ["name"], unique=True)
    op.create_index("ix_boards_last_activity_at", "boards", ["last_activity_at"])

    op.create_table(
        "columns",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column(
            "board_id",
            sa.String(26),
            sa.ForeignKey("boards.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_columns_board_id", "columns", ["board_id"])

    op.create_table(
        "cards",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column(
            "column_id",
            sa.String(26),
            sa.ForeignKey("columns.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("content", sa.String(1000), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_cards_column_id", "cards", ["column_id"])


def downgrade() -> None:
    op.drop_index("ix_cards_column_id", table_name="cards")
    op.drop_table("cards")
    op.drop_index("ix_columns_board_id", table_name="columns")
    op.drop_table("columns")
    op.drop_index("ix_boards_last_activity_at", table_name="boards")
    op.drop_index("ix_boards_name", table_name="boards")
    op.drop_table("boards")
