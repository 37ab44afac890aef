"""On-device board tables.

Same shape as the shared tables minus the server-only fields (PIN digest, activity
timestamp). Parent ids are indexed but carry no foreign keys and names are not unique,
so deletes never cascade here.
"""

from sqlalchemy import Column, DateTime, Index, Integer, MetaData, String, Table
from sqlalchemy.ext.asyncio import AsyncEngine

from nokanban.core.constants import FieldSizes

local_metadata = MetaData()

local_boards = Table(
    "boards",
    local_metadata,
    Column("id", String(FieldSizes.ULID), primary_key=True),
    Column("name", String(FieldSizes.NAME), nullable=False, index=True),
    Column("title", String(FieldSizes.TITLE), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

local_columns = Table(
    "columns",
    local_metadata,
    Column("id", String(FieldSizes.ULID), primary_key=True),
    Column("board_id", String(FieldSizes.ULID), nullable=False),
    Column("title", String(FieldSizes.TITLE), nullable=False),
    Column("position", Integer, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    Index("ix_local_columns_board_position", "board_id", "position"),
)

local_cards = Table(
    "cards",
    local_metadata,
    Column("id", String(FieldSizes.ULID), primary_key=True),
    Column("column_id", String(FieldSizes.ULID), nullable=False),
    Column("content", String(FieldSizes.CONTENT), nullable=False),
    Column("position", Integer, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    Index("ix_local_cards_column_position", "column_id", "position"),
)


async def create_local_tables(bind: AsyncEngine) -> None:
    """Create the on-device tables if they don't exist."""
    async with bind.begin() as conn:
        await conn.run_sync(local_metadata.create_all)
