import json

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport

from nokanban.core.exceptions.domain import (
    InvalidCredentialError,
    InvalidSnapshotError,
    NameTakenError,
    ResourceNotFoundError,
)
from nokanban.main import create_app
from nokanban.models.db import get_session
from nokanban.services.api_client import BoardApiClient
from nokanban.services.board_service import BoardMutationService
from nokanban.services.rate_limiter import get_rate_limiter
from nokanban.services.sync_service import SyncService

PIN = "1234"

EXPORTED = {
    "board": {"id": "old-board", "name": "home", "title": "Exported"},
    "columns": [
        {
            "id": "old-column",
            "title": "To-do",
            "position": 0,
            "cards": [{"id": "old-card", "content": "A", "position": 0}],
        },
        {"title": "Done", "position": 3, "cards": []},
    ],
}


@pytest.fixture
def sync(local_service: BoardMutationService) -> SyncService:
    return SyncService(local_service)


@pytest.fixture
def app(session_maker, rate_limiter) -> FastAPI:
    app = create_app(with_lifespan=False)

    async def _override_get_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_session] = _override_get_session
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    return app


@pytest_asyncio.fixture
async def api_client(app: FastAPI) -> BoardApiClient:
    async with BoardApiClient("http://test/api/v1", transport=ASGITransport(app=app)) as client:
        yield client


@pytest.mark.asyncio
async def test_import_assigns_new_ids_and_keeps_layout(sync: SyncService) -> None:
    imported = await sync.import_snapshot(EXPORTED)

    board = await sync.local.get_board(imported.id)
    assert imported.id != "old-board"
    assert board.title == "Exported"
    assert [(c.title, c.position) for c in board.columns] == [("To-do", 0), ("Done", 3)]
    card = board.columns[0].cards[0]
    assert (card.content, card.position) == ("A", 0)
    assert card.id != "old-card"
    assert board.columns[0].id != "old-column"


@pytest.mark.asyncio
async def test_import_twice_creates_two_boards(sync: SyncService) -> None:
    first = await sync.import_snapshot(EXPORTED)
    second = await sync.import_snapshot(json.dumps(EXPORTED))

    assert first.id != second.id


@pytest.mark.asyncio
async def test_export_round_trip(sync: SyncService) -> None:
    home = await sync.local.ensure_home_board()
    column = (await sync.local.get_board(home.id)).columns[1]
    await sync.local.create_card(home.id, column.id, "Review", 0)

    exported = json.loads(await sync.export_json(home.id))
    copy = await sync.local.get_board((await sync.import_snapshot(exported)).id)

    assert exported["board"]["title"] == "My Kanban Board"
    assert "createdAt" in exported["columns"][0]
    assert [c.title for c in copy.columns] == ["To-do", "In Progress", "Done"]
    assert [card.content for card in copy.columns[1].cards] == ["Review"]


@pytest.mark.asyncio
async def test_export_unknown_board(sync: SyncService) -> None:
    with pytest.raises(ResourceNotFoundError):
        await sync.export_snapshot("missing")


@pytest.mark.parametrize(
    "data",
    [
        "not json",
        "[]",
        {"columns": []},
        {"board": {"name": "x", "title": "y"}, "columns": [{"title": "t", "position": -1}]},
        {"board": {"name": "x", "title": "y"}, "columns": [{"position": 0}]},
    ],
)
def test_parse_snapshot_rejects_bad_shapes(data) -> None:
    with pytest.raises(InvalidSnapshotError):
        SyncService.parse_snapshot(data)


@pytest.mark.asyncio
async def test_invalid_import_creates_nothing(sync: SyncService) -> None:
    with pytest.raises(InvalidSnapshotError):
        await sync.import_snapshot({"board": {"name": "x"}})

    assert await sync.local.boards.get_all() == []


@pytest.mark.asyncio
async def test_publish_then_pull(sync: SyncService, api_client: BoardApiClient) -> None:
    local = await sync.import_snapshot(EXPORTED)

    shared = await sync.publish(local.id, api_client, name="team-board", title="Team", pin=PIN)

    assert shared.name == "team-board"
    assert [(c.title, c.position) for c in shared.columns] == [("To-do", 0), ("Done", 3)]
    assert [card.content for card in shared.columns[0].cards] == ["A"]

    pulled = await sync.pull("team-board", api_client)
    copy = await sync.local.get_board(pulled.id)
    assert pulled.id != shared.id
    assert [c.title for c in copy.columns] == ["To-do", "Done"]


@pytest.mark.asyncio
async def test_client_maps_errors(api_client: BoardApiClient) -> None:
    await api_client.create_board("team-board", "Team", PIN)

    with pytest.raises(NameTakenError):
        await api_client.create_board("team-board", "Team", PIN)
    with pytest.raises(InvalidCredentialError):
        await api_client.create_column("team-board", "To-do", pin="0000")
    with pytest.raises(ResourceNotFoundError) as exc_info:
        await api_client.get_board("missing-board")
    assert exc_info.value.message == "Board 'missing-board' not found"
    assert str(exc_info.value) == "Board 'missing-board' not found"


@pytest.mark.asyncio
async def test_client_round_trip(api_client: BoardApiClient) -> None:
    await api_client.create_board("team-board", "Team", PIN)
    todo = await api_client.create_column("team-board", "To-do", pin=PIN)
    done = await api_client.create_column("team-board", "Done", pin=PIN)
    card = await api_client.create_card("team-board", todo.id, "A", pin=PIN)

    moved = await api_client.move_card("team-board", card.id, done.id, 0, pin=PIN)
    await api_client.delete_card("team-board", card.id, pin=PIN)
    await api_client.delete_board("team-board", pin=PIN)

    assert moved.column_id == done.id
    with pytest.raises(ResourceNotFoundError):
        await api_client.get_board("team-board")
