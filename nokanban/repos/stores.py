from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from nokanban.core.config import get_settings
from nokanban.models.db import build_engine
from nokanban.models.local import create_local_tables
from nokanban.repos.board import BoardRepo
from nokanban.repos.card import CardRepo
from nokanban.repos.column import ColumnRepo
from nokanban.repos.local import LocalBoardStore, LocalCardStore, LocalColumnStore
from nokanban.repos.protocols import StoreBundle


def remote_stores(session: AsyncSession) -> StoreBundle:
    """Shared-board stores bound to one server database session."""
    return StoreBundle(
        boards=BoardRepo(session),
        columns=ColumnRepo(session),
        cards=CardRepo(session),
    )


def local_stores(engine: AsyncEngine) -> StoreBundle:
    """Private-board stores over the on-device database."""
    return StoreBundle(
        boards=LocalBoardStore(engine),
        columns=LocalColumnStore(engine),
        cards=LocalCardStore(engine),
    )


async def open_local_stores(db_path: str | None = None) -> StoreBundle:
    """Open (creating if needed) the on-device database and return its stores."""
    settings = get_settings()
    if db_path is None:
        db_path = settings.local_db_path
        url = settings.local_db_url
    else:
        url = f"sqlite+aiosqlite:///{db_path}"

    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    engine = build_engine(url)
    await create_local_tables(engine)
    return local_stores(engine)
