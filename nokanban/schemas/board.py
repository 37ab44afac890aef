import re
from datetime import datetime

from pydantic import Field, SecretStr, field_validator

from nokanban.core.constants import BoardLimits, FieldSizes
from nokanban.schemas.base import BaseSchema, BaseTimestampSchema

# ── Request bodies ──


class BoardCreate(BaseSchema):
    name: str = Field(
        min_length=BoardLimits.NAME_MIN,
        max_length=BoardLimits.NAME_MAX,
        pattern=BoardLimits.NAME_PATTERN,
    )
    title: str = Field(min_length=BoardLimits.TITLE_MIN, max_length=BoardLimits.TITLE_MAX)
    pin: SecretStr

    @field_validator("pin")
    @classmethod
    def validate_pin(cls, v: SecretStr) -> SecretStr:
        pin = v.get_secret_value()
        if not re.fullmatch(BoardLimits.PIN_PATTERN, pin):
            raise ValueError("PIN must be exactly 4 digits")
        return v


class ColumnCreate(BaseSchema):
    title: str = Field(min_length=BoardLimits.TITLE_MIN, max_length=BoardLimits.TITLE_MAX)
    position: int | None = Field(default=None, ge=0)


class ColumnTitleUpdate(BaseSchema):
    title: str = Field(min_length=BoardLimits.TITLE_MIN, max_length=BoardLimits.TITLE_MAX)


class CardCreate(BaseSchema):
    content: str = Field(min_length=BoardLimits.CONTENT_MIN, max_length=BoardLimits.CONTENT_MAX)
    position: int | None = Field(default=None, ge=0)


class CardContentUpdate(BaseSchema):
    content: str = Field(min_length=BoardLimits.CONTENT_MIN, max_length=BoardLimits.CONTENT_MAX)


class PositionUpdate(BaseSchema):
    id: str = Field(min_length=FieldSizes.ULID, max_length=FieldSizes.ULID)
    position: int = Field(ge=0)


class ColumnReorder(BaseSchema):
    columns: list[PositionUpdate]


class CardReorder(BaseSchema):
    cards: list[PositionUpdate]


class CardMove(BaseSchema):
    column_id: str = Field(min_length=FieldSizes.ULID, max_length=FieldSizes.ULID)
    position: int = Field(ge=0)


# ── Store records ──


class BoardRecordCreate(BaseSchema):
    """Internal schema for inserting a board into a store."""

    id: str | None = None
    name: str
    title: str
    pin_hash: str | None = None
    last_activity_at: datetime | None = None


class BoardUpdate(BaseSchema):
    title: str | None = None
    last_activity_at: datetime | None = None


class ColumnRecordCreate(BaseSchema):
    id: str | None = None
    board_id: str
    title: str
    position: int


class ColumnUpdate(BaseSchema):
    title: str | None = None
    position: int | None = None


class CardRecordCreate(BaseSchema):
    id: str | None = None
    column_id: str
    content: str
    position: int


class CardUpdate(BaseSchema):
    content: str | None = None
    column_id: str | None = None
    position: int | None = None


# ── Responses (never carry the PIN digest) ──


class BoardResponse(BaseTimestampSchema):
    id: str
    name: str
    title: str


class ColumnResponse(BaseTimestampSchema):
    id: str
    board_id: str
    title: str
    position: int


class CardResponse(BaseTimestampSchema):
    id: str
    column_id: str
    content: str
    position: int


class ColumnWithCards(ColumnResponse):
    cards: list[CardResponse] = Field(default_factory=list)


class BoardPublic(BoardResponse):
    columns: list[ColumnWithCards] = Field(default_factory=list)


class MessageResponse(BaseSchema):
    message: str
