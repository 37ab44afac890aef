from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from nokanban.models.card import Card
from nokanban.repos.base import BaseRepository
from nokanban.schemas.board import CardRecordCreate, CardUpdate


class CardRepo(BaseRepository[Card, CardRecordCreate, CardUpdate]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, Card)

    async def get_by_column(self, column_id: str) -> list[Card]:
        """Get all cards of a column ordered by position."""
        stmt = (
            select(Card)
            .where(Card.column_id == column_id)
            .order_by(Card.position, Card.id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_by_column(self, column_id: str) -> int:
        stmt = select(func.count()).select_from(Card).where(Card.column_id == column_id)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def update_position(self, card_id: str, position: int) -> Card | None:
        return await self.update_by_id(card_id, CardUpdate(position=position))

    async def move(self, card_id: str, column_id: str, position: int) -> Card | None:
        """Reassign a card's column and position in one UPDATE."""
        return await self.update_by_id(card_id, CardUpdate(column_id=column_id, position=position))

    async def delete_by_column(self, column_id: str, *, auto_commit: bool = True) -> int:
        stmt = delete(Card).where(Card.column_id == column_id)
        result = await self.session.execute(stmt)
        if auto_commit:
            await self.session.commit()
        return result.rowcount  # type: ignore
