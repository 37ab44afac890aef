import asyncio

from loguru import logger

from nokanban.core.config import get_settings
from nokanban.core.logger import setup_logger
from nokanban.models.db import get_session_direct
from nokanban.repos.board import BoardRepo


async def cleanup_inactive_boards(days: int | None = None) -> int:
    """Delete shared boards idle for longer than ``days``. Returns count deleted.

    Columns and cards go with their board through the foreign key cascade.
    """
    days = days if days is not None else get_settings().inactive_board_days
    session = await get_session_direct()

    try:
        count = await BoardRepo(session).delete_inactive(days)
        if count:
            logger.info(f"Cleaned up {count} boards inactive for more than {days} days")
        else:
            logger.debug("No inactive boards to clean up")
        return count
    finally:
        await session.close()


def main() -> None:
    setup_logger(debug=get_settings().debug)
    asyncio.run(cleanup_inactive_boards())


if __name__ == "__main__":
    main()
