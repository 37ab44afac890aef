from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from nokanban.core.exceptions.domain import InvalidSnapshotError
from nokanban.schemas.board import (
    BoardPublic,
    BoardRecordCreate,
    BoardResponse,
    CardRecordCreate,
    ColumnRecordCreate,
)
from nokanban.schemas.snapshot import BoardSnapshot, SnapshotBoard, SnapshotCard, SnapshotColumn
from nokanban.services.api_client import BoardApiClient
from nokanban.services.board_service import BoardMutationService
from nokanban.services.position import sort_siblings


class SyncService:
    """Copies boards between the on-device store and the shared service.

    Every copy gets fresh identifiers and timestamps; only titles, contents, positions
    and the column → card nesting survive.
    """

    def __init__(self, local: BoardMutationService):
        self.local = local

    # ─── Export / import ──────────────────────────────────────────────

    @staticmethod
    def snapshot_from(board: BoardPublic) -> BoardSnapshot:
        return BoardSnapshot(
            board=SnapshotBoard.model_validate(board.model_dump(exclude={"columns"})),
            columns=[
                SnapshotColumn(
                    **column.model_dump(exclude={"cards"}),
                    cards=[SnapshotCard.model_validate(card.model_dump()) for card in column.cards],
                )
                for column in board.columns
            ],
        )

    async def export_snapshot(self, board_id: str) -> BoardSnapshot:
        """Snapshot of a local board. Raises ResourceNotFoundError if absent."""
        return self.snapshot_from(await self.local.get_board(board_id))

    async def export_json(self, board_id: str) -> str:
        snapshot = await self.export_snapshot(board_id)
        return snapshot.model_dump_json(by_alias=True, indent=2)

    @staticmethod
    def parse_snapshot(data: str | bytes | dict) -> BoardSnapshot:
        """Parse an exported board. Raises InvalidSnapshotError on any shape mismatch."""
        try:
            if isinstance(data, (str, bytes)):
                return BoardSnapshot.model_validate_json(data)
            return BoardSnapshot.model_validate(data)
        except PydanticValidationError as e:
            raise InvalidSnapshotError(f"Invalid board data: {e}") from e

    async def import_snapshot(self, data: str | bytes | dict | BoardSnapshot) -> BoardResponse:
        """Create a new local board from an export, keeping positions and nesting."""
        snapshot = data if isinstance(data, BoardSnapshot) else self.parse_snapshot(data)

        board = await self.local.boards.create_one(
            BoardRecordCreate(name=snapshot.board.name, title=snapshot.board.title)
        )
        for column in snapshot.columns:
            new_column = await self.local.columns.create_one(
                ColumnRecordCreate(board_id=board.id, title=column.title, position=column.position)
            )
            for card in column.cards:
                await self.local.cards.create_one(
                    CardRecordCreate(
                        column_id=new_column.id, content=card.content, position=card.position
                    )
                )

        logger.info(
            f"Board imported: {board.id} ({len(snapshot.columns)} columns, "
            f"{sum(len(c.cards) for c in snapshot.columns)} cards)"
        )
        return BoardResponse.model_validate(board)

    # ─── Shared boards ────────────────────────────────────────────────

    async def publish(
        self,
        board_id: str,
        client: BoardApiClient,
        *,
        name: str,
        title: str,
        pin: str,
    ) -> BoardPublic:
        """Copy a local board to the shared service under ``name`` and return the result.

        Columns and cards are sent in position order. A failure part-way leaves the
        shared board with whatever was already created.
        """
        board = await self.local.get_board(board_id)

        await client.create_board(name, title, pin)
        for column in sort_siblings(board.columns):
            remote_column = await client.create_column(name, column.title, column.position, pin=pin)
            for card in sort_siblings(column.cards):
                await client.create_card(
                    name, remote_column.id, card.content, card.position, pin=pin
                )

        logger.info(f"Board published: local={board_id} → shared={name}")
        return await client.get_board(name)

    async def pull(self, name: str, client: BoardApiClient) -> BoardResponse:
        """Copy a shared board into a new local board."""
        shared = await client.get_board(name)
        return await self.import_snapshot(self.snapshot_from(shared))
