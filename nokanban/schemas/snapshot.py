"""Board export format.

``{"board": {...}, "columns": [{..., "cards": [...]}]}`` with camelCase keys. Identifiers
and timestamps are informational on import: a new board gets fresh ones.
"""

from datetime import datetime

from pydantic import ConfigDict, Field

from nokanban.schemas.base import BaseSchema


class SnapshotSchema(BaseSchema):
    model_config = ConfigDict(extra="ignore")


class SnapshotCard(SnapshotSchema):
    id: str | None = None
    column_id: str | None = None
    content: str
    position: int = Field(ge=0)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SnapshotColumn(SnapshotSchema):
    id: str | None = None
    board_id: str | None = None
    title: str
    position: int = Field(ge=0)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    cards: list[SnapshotCard] = Field(default_factory=list)


class SnapshotBoard(SnapshotSchema):
    id: str | None = None
    name: str
    title: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class BoardSnapshot(SnapshotSchema):
    board: SnapshotBoard
    columns: list[SnapshotColumn] = Field(default_factory=list)
