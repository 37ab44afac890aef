from fastapi import APIRouter, Depends, status

from nokanban.api.deps import get_board_service, limit_board_creation, require_board_pin
from nokanban.core.exceptions.domain import ResourceNotFoundError
from nokanban.models.board import Board
from nokanban.schemas.board import (
    BoardCreate,
    BoardPublic,
    BoardResponse,
    CardContentUpdate,
    CardCreate,
    CardMove,
    CardReorder,
    CardResponse,
    ColumnCreate,
    ColumnReorder,
    ColumnResponse,
    ColumnTitleUpdate,
    MessageResponse,
)
from nokanban.services.board_service import BoardMutationService

router = APIRouter(prefix="/boards", tags=["boards"])


@router.post(
    "",
    response_model=BoardResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(limit_board_creation)],
)
async def create_board(
    payload: BoardCreate,
    service: BoardMutationService = Depends(get_board_service),
) -> BoardResponse:
    return await service.create_board(payload.name, payload.title, payload.pin.get_secret_value())


@router.get("/{name}", response_model=BoardPublic)
async def get_board(
    name: str,
    service: BoardMutationService = Depends(get_board_service),
) -> BoardPublic:
    return await service.get_board_public(name)


@router.delete("/{name}", response_model=MessageResponse)
async def delete_board(
    board: Board = Depends(require_board_pin),
    service: BoardMutationService = Depends(get_board_service),
) -> MessageResponse:
    await service.delete_board(board.id)
    return MessageResponse(message="Board deleted successfully")


# ── Columns ──


@router.post(
    "/{name}/columns", response_model=ColumnResponse, status_code=status.HTTP_201_CREATED
)
async def create_column(
    payload: ColumnCreate,
    board: Board = Depends(require_board_pin),
    service: BoardMutationService = Depends(get_board_service),
) -> ColumnResponse:
    column = await service.create_column(board.id, payload.title, payload.position)
    if column is None:
        raise ResourceNotFoundError("Board", board.name)
    return column


@router.patch("/{name}/columns/reorder", response_model=MessageResponse)
async def reorder_columns(
    payload: ColumnReorder,
    board: Board = Depends(require_board_pin),
    service: BoardMutationService = Depends(get_board_service),
) -> MessageResponse:
    if not await service.reorder_columns(board.id, payload.columns):
        raise ResourceNotFoundError("Board", board.name)
    return MessageResponse(message="Columns reordered successfully")


@router.patch("/{name}/columns/{column_id}/title", response_model=ColumnResponse)
async def update_column_title(
    column_id: str,
    payload: ColumnTitleUpdate,
    board: Board = Depends(require_board_pin),
    service: BoardMutationService = Depends(get_board_service),
) -> ColumnResponse:
    column = await service.update_column_title(board.id, column_id, payload.title)
    if column is None:
        raise ResourceNotFoundError("Column", column_id)
    return column


@router.delete("/{name}/columns/{column_id}", response_model=MessageResponse)
async def delete_column(
    column_id: str,
    board: Board = Depends(require_board_pin),
    service: BoardMutationService = Depends(get_board_service),
) -> MessageResponse:
    if not await service.delete_column(board.id, column_id):
        raise ResourceNotFoundError("Column", column_id)
    return MessageResponse(message="Column deleted successfully")


# ── Cards ──


@router.post(
    "/{name}/columns/{column_id}/cards",
    response_model=CardResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_card(
    column_id: str,
    payload: CardCreate,
    board: Board = Depends(require_board_pin),
    service: BoardMutationService = Depends(get_board_service),
) -> CardResponse:
    card = await service.create_card(board.id, column_id, payload.content, payload.position)
    if card is None:
        raise ResourceNotFoundError("Column", column_id)
    return card


@router.patch("/{name}/columns/{column_id}/cards/reorder", response_model=MessageResponse)
async def reorder_cards(
    column_id: str,
    payload: CardReorder,
    board: Board = Depends(require_board_pin),
    service: BoardMutationService = Depends(get_board_service),
) -> MessageResponse:
    if not await service.reorder_cards(board.id, column_id, payload.cards):
        raise ResourceNotFoundError("Column", column_id)
    return MessageResponse(message="Cards reordered successfully")


@router.patch("/{name}/cards/{card_id}/content", response_model=CardResponse)
async def update_card_content(
    card_id: str,
    payload: CardContentUpdate,
    board: Board = Depends(require_board_pin),
    service: BoardMutationService = Depends(get_board_service),
) -> CardResponse:
    card = await service.update_card_content(board.id, card_id, payload.content)
    if card is None:
        raise ResourceNotFoundError("Card", card_id)
    return card


@router.patch("/{name}/cards/{card_id}/move", response_model=CardResponse)
async def move_card(
    card_id: str,
    payload: CardMove,
    board: Board = Depends(require_board_pin),
    service: BoardMutationService = Depends(get_board_service),
) -> CardResponse:
    card = await service.move_card(board.id, card_id, payload.column_id, payload.position)
    if card is None:
        raise ResourceNotFoundError("Card", card_id)
    return card


@router.delete("/{name}/cards/{card_id}", response_model=MessageResponse)
async def delete_card(
    card_id: str,
    board: Board = Depends(require_board_pin),
    service: BoardMutationService = Depends(get_board_service),
) -> MessageResponse:
    if not await service.delete_card(board.id, card_id):
        raise ResourceNotFoundError("Card", card_id)
    return MessageResponse(message="Card deleted successfully")
