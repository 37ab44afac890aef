from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from nokanban.models.column import Column
from nokanban.repos.base import BaseRepository
from nokanban.schemas.board import ColumnRecordCreate, ColumnUpdate


class ColumnRepo(BaseRepository[Column, ColumnRecordCreate, ColumnUpdate]):
    cascades_deletes = True

    def __init__(self, session: AsyncSession):
        super().__init__(session, Column)

    async def get_by_board(self, board_id: str) -> list[Column]:
        """Get all columns of a board ordered by position."""
        stmt = (
            select(Column)
            .where(Column.board_id == board_id)
            .order_by(Column.position, Column.id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_by_board(self, board_id: str) -> int:
        stmt = select(func.count()).select_from(Column).where(Column.board_id == board_id)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def update_position(self, column_id: str, position: int) -> Column | None:
        return await self.update_by_id(column_id, ColumnUpdate(position=position))

    async def delete_by_board(self, board_id: str, *, auto_commit: bool = True) -> int:
        """Delete all columns of a board. Their cards go with them via FK cascade."""
        stmt = delete(Column).where(Column.board_id == board_id)
        result = await self.session.execute(stmt)
        if auto_commit:
            await self.session.commit()
        return result.rowcount  # type: ignore
