"""Capability interfaces shared by the shared-board and on-device stores.

Lookups signal absence with ``None``. Parent queries return siblings ordered by
``position`` with insertion order (ULID) as the tiebreak. ``update_positions`` applies its
pairs in list order without gap filling or collision checks.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from nokanban.schemas.board import (
    BoardRecordCreate,
    BoardUpdate,
    CardRecordCreate,
    CardUpdate,
    ColumnRecordCreate,
    ColumnUpdate,
    PositionUpdate,
)


class BoardEntity(Protocol):
    id: str
    name: str
    title: str
    created_at: datetime
    updated_at: datetime | None


class ColumnEntity(Protocol):
    id: str
    board_id: str
    title: str
    position: int
    created_at: datetime
    updated_at: datetime | None


class CardEntity(Protocol):
    id: str
    column_id: str
    content: str
    position: int
    created_at: datetime
    updated_at: datetime | None


class BoardStore(Protocol):
    # Deleting a board also removes its columns and cards
    cascades_deletes: bool
    # Keeps last_activity_at for idle cleanup
    tracks_activity: bool
    # Board names are globally unique
    unique_names: bool

    async def get_by_id(self, board_id: str) -> BoardEntity | None: ...

    async def get_by_name(self, name: str) -> BoardEntity | None: ...

    async def create_one(self, schema: BoardRecordCreate) -> BoardEntity: ...

    async def update_by_id(self, board_id: str, schema: BoardUpdate) -> BoardEntity | None: ...

    async def touch_activity(self, board_id: str) -> None: ...

    async def delete_by_id(self, board_id: str) -> bool: ...


class ColumnStore(Protocol):
    cascades_deletes: bool

    async def get_by_id(self, column_id: str) -> ColumnEntity | None: ...

    async def get_by_board(self, board_id: str) -> list[ColumnEntity]: ...

    async def count_by_board(self, board_id: str) -> int: ...

    async def create_one(self, schema: ColumnRecordCreate) -> ColumnEntity: ...

    async def update_by_id(self, column_id: str, schema: ColumnUpdate) -> ColumnEntity | None: ...

    async def update_position(self, column_id: str, position: int) -> ColumnEntity | None: ...

    async def update_positions(self, updates: list[PositionUpdate]) -> None: ...

    async def delete_by_id(self, column_id: str) -> bool: ...

    async def delete_by_board(self, board_id: str) -> int: ...


class CardStore(Protocol):
    async def get_by_id(self, card_id: str) -> CardEntity | None: ...

    async def get_by_column(self, column_id: str) -> list[CardEntity]: ...

    async def count_by_column(self, column_id: str) -> int: ...

    async def create_one(self, schema: CardRecordCreate) -> CardEntity: ...

    async def update_by_id(self, card_id: str, schema: CardUpdate) -> CardEntity | None: ...

    async def update_position(self, card_id: str, position: int) -> CardEntity | None: ...

    async def move(self, card_id: str, column_id: str, position: int) -> CardEntity | None: ...

    async def update_positions(self, updates: list[PositionUpdate]) -> None: ...

    async def delete_by_id(self, card_id: str) -> bool: ...

    async def delete_by_column(self, column_id: str) -> int: ...


@dataclass(frozen=True)
class StoreBundle:
    """One store per entity family, all backed by the same database."""

    boards: BoardStore
    columns: ColumnStore
    cards: CardStore
