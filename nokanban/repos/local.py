"""On-device stores for private boards.

Rows come back as response schemas. There is no declarative cascade, no name uniqueness
and no activity tracking, so callers delete children explicitly.
"""

from datetime import datetime, timezone
from typing import Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import Table, delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncEngine

from nokanban.core.exceptions.domain import CreationFailedError
from nokanban.models.local import local_boards, local_cards, local_columns
from nokanban.schemas.board import (
    BoardRecordCreate,
    BoardResponse,
    BoardUpdate,
    CardRecordCreate,
    CardResponse,
    CardUpdate,
    ColumnRecordCreate,
    ColumnResponse,
    ColumnUpdate,
    PositionUpdate,
)
from nokanban.utils.ids import generate_id

EntityType = TypeVar("EntityType", bound=BaseModel)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class _LocalTableStore(Generic[EntityType]):
    """Async CRUD over one local table, shared by the three entity stores."""

    table: Table
    entity: type[EntityType]
    resource: str
    parent_key: str | None = None
    writable_fields: frozenset[str] = frozenset()

    cascades_deletes = False

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    def _to_entity(self, row) -> EntityType | None:
        if row is None:
            return None
        return self.entity.model_validate(dict(row._mapping))

    async def get_by_id(self, obj_id: str) -> EntityType | None:
        async with self.engine.connect() as conn:
            result = await conn.execute(select(self.table).where(self.table.c.id == obj_id))
            return self._to_entity(result.first())

    async def _create(self, data: dict) -> EntityType:
        now = _now()
        values = {k: v for k, v in data.items() if v is not None}
        values.setdefault("id", generate_id())
        values.setdefault("created_at", now)
        values.setdefault("updated_at", now)

        async with self.engine.begin() as conn:
            result = await conn.execute(insert(self.table).values(**values).returning(self.table))
            instance = self._to_entity(result.first())
        if instance is None:
            raise CreationFailedError(self.resource)
        return instance

    async def update_by_id(self, obj_id: str, schema: BaseModel) -> EntityType | None:
        data = {
            k: v
            for k, v in schema.model_dump(exclude_none=True).items()
            if k in self.writable_fields
        }
        if not data:
            return await self.get_by_id(obj_id)

        stmt = (
            update(self.table)
            .where(self.table.c.id == obj_id)
            .values(**data, updated_at=_now())
            .returning(self.table)
        )
        async with self.engine.begin() as conn:
            result = await conn.execute(stmt)
            return self._to_entity(result.first())

    async def delete_by_id(self, obj_id: str) -> bool:
        async with self.engine.begin() as conn:
            result = await conn.execute(delete(self.table).where(self.table.c.id == obj_id))
            return result.rowcount > 0

    # ── Parent-scoped helpers ──

    async def _get_by_parent(self, parent_id: str) -> list[EntityType]:
        parent = self.table.c[self.parent_key]
        stmt = (
            select(self.table)
            .where(parent == parent_id)
            .order_by(self.table.c.position, self.table.c.id)
        )
        async with self.engine.connect() as conn:
            result = await conn.execute(stmt)
            return [self._to_entity(row) for row in result]

    async def _count_by_parent(self, parent_id: str) -> int:
        parent = self.table.c[self.parent_key]
        stmt = select(func.count()).select_from(self.table).where(parent == parent_id)
        async with self.engine.connect() as conn:
            result = await conn.execute(stmt)
            return result.scalar_one()

    async def _delete_by_parent(self, parent_id: str) -> int:
        parent = self.table.c[self.parent_key]
        async with self.engine.begin() as conn:
            result = await conn.execute(delete(self.table).where(parent == parent_id))
            return result.rowcount

    async def update_positions(self, updates: list[PositionUpdate]) -> None:
        """Write each {id, position} pair in list order inside one transaction."""
        now = _now()
        async with self.engine.begin() as conn:
            for item in updates:
                await conn.execute(
                    update(self.table)
                    .where(self.table.c.id == item.id)
                    .values(position=item.position, updated_at=now)
                )


class LocalBoardStore(_LocalTableStore[BoardResponse]):
    table = local_boards
    entity = BoardResponse
    resource = "Board"
    writable_fields = frozenset({"title"})

    tracks_activity = False
    unique_names = False

    async def get_by_name(self, name: str) -> BoardResponse | None:
        """First board with this name. Local names are labels, not keys."""
        stmt = (
            select(local_boards)
            .where(local_boards.c.name == name)
            .order_by(local_boards.c.id)
            .limit(1)
        )
        async with self.engine.connect() as conn:
            result = await conn.execute(stmt)
            return self._to_entity(result.first())

    async def get_all(self) -> list[BoardResponse]:
        async with self.engine.connect() as conn:
            result = await conn.execute(select(local_boards).order_by(local_boards.c.id))
            return [self._to_entity(row) for row in result]

    async def create_one(self, schema: BoardRecordCreate) -> BoardResponse:
        return await self._create(schema.model_dump(include={"id", "name", "title"}))

    async def update_by_id(self, board_id: str, schema: BoardUpdate) -> BoardResponse | None:
        return await super().update_by_id(board_id, schema)

    async def touch_activity(self, board_id: str) -> None:
        """Private boards are never idle-collected, so there is nothing to record."""
        return None


class LocalColumnStore(_LocalTableStore[ColumnResponse]):
    table = local_columns
    entity = ColumnResponse
    resource = "Column"
    parent_key = "board_id"
    writable_fields = frozenset({"title", "position"})

    async def get_by_board(self, board_id: str) -> list[ColumnResponse]:
        return await self._get_by_parent(board_id)

    async def count_by_board(self, board_id: str) -> int:
        return await self._count_by_parent(board_id)

    async def create_one(self, schema: ColumnRecordCreate) -> ColumnResponse:
        return await self._create(schema.model_dump())

    async def update_position(self, column_id: str, position: int) -> ColumnResponse | None:
        return await self.update_by_id(column_id, ColumnUpdate(position=position))

    async def delete_by_board(self, board_id: str) -> int:
        return await self._delete_by_parent(board_id)


class LocalCardStore(_LocalTableStore[CardResponse]):
    table = local_cards
    entity = CardResponse
    resource = "Card"
    parent_key = "column_id"
    writable_fields = frozenset({"content", "column_id", "position"})

    async def get_by_column(self, column_id: str) -> list[CardResponse]:
        return await self._get_by_parent(column_id)

    async def count_by_column(self, column_id: str) -> int:
        return await self._count_by_parent(column_id)

    async def create_one(self, schema: CardRecordCreate) -> CardResponse:
        return await self._create(schema.model_dump())

    async def update_position(self, card_id: str, position: int) -> CardResponse | None:
        return await self.update_by_id(card_id, CardUpdate(position=position))

    async def move(self, card_id: str, column_id: str, position: int) -> CardResponse | None:
        """Reassign a card's column and position in one UPDATE."""
        return await self.update_by_id(card_id, CardUpdate(column_id=column_id, position=position))

    async def delete_by_column(self, column_id: str) -> int:
        return await self._delete_by_parent(column_id)
