from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from nokanban.core.config import get_settings
from nokanban.core.constants import PIN_HEADER, RateLimitPrefix
from nokanban.core.exceptions.domain import ResourceNotFoundError
from nokanban.models.board import Board
from nokanban.models.db import get_session
from nokanban.repos.board import BoardRepo
from nokanban.repos.stores import remote_stores
from nokanban.services.board_service import BoardMutationService
from nokanban.services.pin_gate import PinGate, get_pin_gate
from nokanban.services.rate_limiter import RateLimiter, get_rate_limiter


def client_ip(request: Request) -> str:
    """Best-effort client address as seen through the edge proxy."""
    return (
        request.headers.get("CF-Connecting-IP")
        or request.headers.get("X-Forwarded-For")
        or "unknown"
    )


def get_board_service(session: AsyncSession = Depends(get_session)) -> BoardMutationService:
    return BoardMutationService(remote_stores(session))


async def limit_board_creation(
    request: Request,
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> None:
    settings = get_settings()
    await limiter.hit(
        limiter.client_key(RateLimitPrefix.CREATE_BOARD, client_ip(request)),
        limit=settings.create_board_limit,
        window_seconds=settings.create_board_window_seconds,
    )


async def get_board_or_404(name: str, session: AsyncSession = Depends(get_session)) -> Board:
    board = await BoardRepo(session).get_by_name(name)
    if board is None:
        raise ResourceNotFoundError("Board", name)
    return board


async def require_board_pin(
    request: Request,
    board: Board = Depends(get_board_or_404),
    pin: str | None = Header(default=None, alias=PIN_HEADER),
    gate: PinGate = Depends(get_pin_gate),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> Board:
    """Resolve the board, check its PIN, then count the request against its window."""
    gate.require(pin, board.pin_hash)

    settings = get_settings()
    await limiter.hit(
        limiter.board_key(board.id, client_ip(request)),
        limit=settings.board_mutation_limit,
        window_seconds=settings.board_mutation_window_seconds,
    )
    return board
