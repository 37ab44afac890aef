from datetime import datetime, timezone

from loguru import logger

from nokanban.core.constants import (
    DEFAULT_COLUMN_TITLES,
    HOME_BOARD_ID,
    HOME_BOARD_NAME,
    HOME_BOARD_TITLE,
)
from nokanban.core.exceptions.domain import NameTakenError, ResourceNotFoundError, ValidationError
from nokanban.core.security import PinHasher, get_pin_hasher
from nokanban.repos.protocols import BoardEntity, CardEntity, ColumnEntity, StoreBundle
from nokanban.schemas.board import (
    BoardPublic,
    BoardRecordCreate,
    BoardResponse,
    BoardUpdate,
    CardRecordCreate,
    CardResponse,
    CardUpdate,
    ColumnRecordCreate,
    ColumnResponse,
    ColumnUpdate,
    ColumnWithCards,
    PositionUpdate,
)
from nokanban.services.position import (
    append_position,
    clamp_position,
    move_to_index,
    sort_siblings,
)


class BoardMutationService:
    """Board → column → card business rules over any store bundle.

    Every successful column or card mutation bumps the owning board's activity. A missing
    target is reported as ``None`` (or ``False``) and leaves activity untouched; only
    ``get_board``/``get_board_public`` raise ``ResourceNotFoundError``.
    """

    def __init__(self, stores: StoreBundle, hasher: PinHasher | None = None):
        self.boards = stores.boards
        self.columns = stores.columns
        self.cards = stores.cards
        self.hasher = hasher or get_pin_hasher()

    # ── Helpers ──

    async def _touch(self, board_id: str) -> None:
        await self.boards.touch_activity(board_id)

    async def _column_in_board(self, board_id: str, column_id: str) -> ColumnEntity | None:
        column = await self.columns.get_by_id(column_id)
        if column is None or column.board_id != board_id:
            logger.debug(f"Column {column_id} not found on board {board_id}")
            return None
        return column

    async def _card_in_board(self, board_id: str, card_id: str) -> CardEntity | None:
        card = await self.cards.get_by_id(card_id)
        if card is None or await self._column_in_board(board_id, card.column_id) is None:
            logger.debug(f"Card {card_id} not found on board {board_id}")
            return None
        return card

    async def _assemble(self, board: BoardEntity) -> BoardPublic:
        columns = []
        for column in sort_siblings(await self.columns.get_by_board(board.id)):
            cards = sort_siblings(await self.cards.get_by_column(column.id))
            columns.append(
                ColumnWithCards.model_validate(column).model_copy(
                    update={"cards": [CardResponse.model_validate(c) for c in cards]}
                )
            )
        return BoardPublic.model_validate(board).model_copy(update={"columns": columns})

    # ── Boards ──

    async def create_board(self, name: str, title: str, pin: str | None = None) -> BoardResponse:
        """Create a board. Shared stores require a PIN and a free name."""
        if self.boards.unique_names and await self.boards.get_by_name(name):
            raise NameTakenError(name)

        pin_hash = None
        last_activity_at = None
        if self.boards.tracks_activity:
            if not pin:
                raise ValidationError("PIN is required for shared boards")
            pin_hash = self.hasher.hash(pin)
            last_activity_at = datetime.now(timezone.utc)

        board = await self.boards.create_one(
            BoardRecordCreate(
                name=name,
                title=title,
                pin_hash=pin_hash,
                last_activity_at=last_activity_at,
            )
        )
        logger.info(f"Board created: {board.name} (id={board.id})")
        return BoardResponse.model_validate(board)

    async def get_board(self, board_id: str) -> BoardPublic:
        """Full board by id, columns and cards in position order."""
        board = await self.boards.get_by_id(board_id)
        if not board:
            raise ResourceNotFoundError("Board", board_id)
        return await self._assemble(board)

    async def get_board_public(self, name: str) -> BoardPublic:
        """Full board by public name. Reading counts as activity."""
        board = await self.boards.get_by_name(name)
        if not board:
            raise ResourceNotFoundError("Board", name)
        await self._touch(board.id)
        return await self._assemble(board)

    async def update_board_title(self, board_id: str, title: str) -> BoardResponse | None:
        board = await self.boards.update_by_id(board_id, BoardUpdate(title=title))
        if board is None:
            return None
        await self._touch(board_id)
        return BoardResponse.model_validate(board)

    async def delete_board(self, board_id: str) -> bool:
        """Delete a board with all of its columns and cards."""
        if not self.boards.cascades_deletes:
            for column in await self.columns.get_by_board(board_id):
                await self.cards.delete_by_column(column.id)
            await self.columns.delete_by_board(board_id)

        deleted = await self.boards.delete_by_id(board_id)
        if deleted:
            logger.info(f"Board deleted: id={board_id}")
        return deleted

    async def ensure_home_board(self) -> BoardResponse:
        """Return the default private board, creating it with three columns if missing."""
        board = await self.boards.get_by_id(HOME_BOARD_ID)
        if board:
            return BoardResponse.model_validate(board)

        board = await self.boards.create_one(
            BoardRecordCreate(id=HOME_BOARD_ID, name=HOME_BOARD_NAME, title=HOME_BOARD_TITLE)
        )
        for position, title in enumerate(DEFAULT_COLUMN_TITLES):
            await self.columns.create_one(
                ColumnRecordCreate(board_id=board.id, title=title, position=position)
            )
        logger.info("Home board initialized")
        return BoardResponse.model_validate(board)

    # ── Columns ──

    async def create_column(
        self, board_id: str, title: str, position: int | None = None
    ) -> ColumnResponse | None:
        """Add a column; without a position it is appended after its siblings."""
        if not await self.boards.get_by_id(board_id):
            return None
        if position is None:
            position = append_position(await self.columns.count_by_board(board_id))

        column = await self.columns.create_one(
            ColumnRecordCreate(board_id=board_id, title=title, position=position)
        )
        await self._touch(board_id)
        return ColumnResponse.model_validate(column)

    async def update_column_title(
        self, board_id: str, column_id: str, title: str
    ) -> ColumnResponse | None:
        if not await self._column_in_board(board_id, column_id):
            return None
        column = await self.columns.update_by_id(column_id, ColumnUpdate(title=title))
        if column is None:
            return None
        await self._touch(board_id)
        return ColumnResponse.model_validate(column)

    async def reorder_columns(self, board_id: str, updates: list[PositionUpdate]) -> bool:
        """Persist the given column positions as-is. Ids outside the board are skipped."""
        if not await self.boards.get_by_id(board_id):
            return False
        own_ids = {c.id for c in await self.columns.get_by_board(board_id)}
        await self.columns.update_positions([u for u in updates if u.id in own_ids])
        await self._touch(board_id)
        return True

    async def reposition_column(
        self, board_id: str, column_id: str, index: int
    ) -> list[PositionUpdate] | None:
        """Move a column to ``index`` and renumber its siblings to match."""
        if not await self._column_in_board(board_id, column_id):
            return None
        siblings = [c.id for c in sort_siblings(await self.columns.get_by_board(board_id))]
        updates = move_to_index(siblings, column_id, index)
        await self.columns.update_positions(updates)
        await self._touch(board_id)
        return updates

    async def delete_column(self, board_id: str, column_id: str) -> bool:
        """Delete a column and its cards."""
        if not await self._column_in_board(board_id, column_id):
            return False
        if not self.columns.cascades_deletes:
            await self.cards.delete_by_column(column_id)
        await self.columns.delete_by_id(column_id)
        await self._touch(board_id)
        logger.info(f"Column deleted: id={column_id} (board={board_id})")
        return True

    # ── Cards ──

    async def create_card(
        self, board_id: str, column_id: str, content: str, position: int | None = None
    ) -> CardResponse | None:
        """Add a card; without a position it is appended after its siblings."""
        if not await self._column_in_board(board_id, column_id):
            return None
        if position is None:
            position = append_position(await self.cards.count_by_column(column_id))

        card = await self.cards.create_one(
            CardRecordCreate(column_id=column_id, content=content, position=position)
        )
        await self._touch(board_id)
        return CardResponse.model_validate(card)

    async def update_card_content(
        self, board_id: str, card_id: str, content: str
    ) -> CardResponse | None:
        if not await self._card_in_board(board_id, card_id):
            return None
        card = await self.cards.update_by_id(card_id, CardUpdate(content=content))
        if card is None:
            return None
        await self._touch(board_id)
        return CardResponse.model_validate(card)

    async def move_card(
        self, board_id: str, card_id: str, column_id: str, position: int
    ) -> CardResponse | None:
        """Reparent a card; column and position change in a single store write."""
        card = await self._card_in_board(board_id, card_id)
        if card is None or not await self._column_in_board(board_id, column_id):
            return None

        sibling_count = await self.cards.count_by_column(column_id)
        if card.column_id == column_id:
            sibling_count -= 1
        moved = await self.cards.move(card_id, column_id, clamp_position(position, sibling_count))
        if moved is None:
            return None
        await self._touch(board_id)
        return CardResponse.model_validate(moved)

    async def reposition_card(
        self, board_id: str, card_id: str, column_id: str, index: int
    ) -> list[PositionUpdate] | None:
        """Move a card to ``index`` within ``column_id`` and renumber that column."""
        card = await self._card_in_board(board_id, card_id)
        if card is None or not await self._column_in_board(board_id, column_id):
            return None

        siblings = [c.id for c in sort_siblings(await self.cards.get_by_column(column_id))]
        updates = move_to_index(siblings, card_id, index)
        target = next(u for u in updates if u.id == card_id)
        await self.cards.move(card_id, column_id, target.position)
        await self.cards.update_positions([u for u in updates if u.id != card_id])
        await self._touch(board_id)
        return updates

    async def reorder_cards(
        self, board_id: str, column_id: str, updates: list[PositionUpdate]
    ) -> bool:
        """Persist the given card positions as-is. Ids outside the column are skipped."""
        if not await self._column_in_board(board_id, column_id):
            return False
        own_ids = {c.id for c in await self.cards.get_by_column(column_id)}
        await self.cards.update_positions([u for u in updates if u.id in own_ids])
        await self._touch(board_id)
        return True

    async def delete_card(self, board_id: str, card_id: str) -> bool:
        if not await self._card_in_board(board_id, card_id):
            return False
        await self.cards.delete_by_id(card_id)
        await self._touch(board_id)
        return True
