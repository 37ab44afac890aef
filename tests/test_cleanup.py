from datetime import datetime, timedelta, timezone

import pytest

from nokanban.repos.board import BoardRepo
from nokanban.schemas.board import BoardUpdate
from nokanban.services import cleanup


@pytest.mark.asyncio
async def test_cleanup_inactive_boards(monkeypatch, session_maker, remote_service) -> None:
    stale = await remote_service.create_board("stale-board", "Stale", "1234")
    await remote_service.create_board("fresh-board", "Fresh", "1234")
    await BoardRepo(remote_service.boards.session).update_by_id(
        stale.id, BoardUpdate(last_activity_at=datetime.now(timezone.utc) - timedelta(days=31))
    )

    async def _session_direct():
        return session_maker()

    monkeypatch.setattr(cleanup, "get_session_direct", _session_direct)

    assert await cleanup.cleanup_inactive_boards(days=30) == 1
    assert await cleanup.cleanup_inactive_boards(days=30) == 0
    assert await remote_service.boards.get_by_name("fresh-board") is not None
