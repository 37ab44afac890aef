from datetime import datetime, timedelta, timezone

from loguru import logger
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from nokanban.core.exceptions.domain import NameTakenError
from nokanban.models.board import Board
from nokanban.repos.base import BaseRepository
from nokanban.schemas.board import BoardRecordCreate, BoardUpdate


class BoardRepo(BaseRepository[Board, BoardRecordCreate, BoardUpdate]):
    cascades_deletes = True
    tracks_activity = True
    unique_names = True

    def __init__(self, session: AsyncSession):
        super().__init__(session, Board)

    async def create_one(
        self,
        schema: BoardRecordCreate,
        *,
        auto_commit: bool = True,
    ) -> Board:
        """Insert a board. A name claimed concurrently raises NameTakenError."""
        try:
            return await super().create_one(schema, auto_commit=auto_commit)
        except IntegrityError as e:
            await self.session.rollback()
            logger.info(f"Board name collision on insert: {schema.name}")
            raise NameTakenError(schema.name) from e

    async def get_by_name(self, name: str) -> Board | None:
        """Get a board by its public name (case-sensitive)."""
        stmt = select(Board).where(Board.name == name).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def touch_activity(self, board_id: str, *, auto_commit: bool = True) -> None:
        """Set last_activity_at to now without touching updated_at."""
        stmt = (
            update(Board)
            .where(Board.id == board_id)
            .values(last_activity_at=datetime.now(timezone.utc), updated_at=Board.updated_at)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
        if auto_commit:
            await self.session.commit()

    async def delete_inactive(self, days: int, *, auto_commit: bool = True) -> int:
        """Delete boards idle for more than ``days`` days. Returns count deleted."""
        cutoff = datetime.now(timezone.utc) - timedelta(days=days)
        stmt = (
            delete(Board)
            .where(Board.last_activity_at < cutoff)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        if auto_commit:
            await self.session.commit()
        return result.rowcount  # type: ignore
