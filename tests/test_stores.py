"""Store contract checks against the shared (ORM) and local (Core) backends."""

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from nokanban.repos.board import BoardRepo
from nokanban.repos.card import CardRepo
from nokanban.repos.column import ColumnRepo
from nokanban.repos.protocols import StoreBundle
from nokanban.repos.stores import local_stores, open_local_stores, remote_stores
from nokanban.schemas.board import (
    BoardRecordCreate,
    CardRecordCreate,
    ColumnRecordCreate,
    ColumnUpdate,
    PositionUpdate,
)


@pytest.fixture(params=["remote", "local"])
def stores(request, session: AsyncSession, local_engine: AsyncEngine) -> StoreBundle:
    if request.param == "remote":
        return remote_stores(session)
    return local_stores(local_engine)


async def _seed(stores: StoreBundle, name: str = "team-board"):
    board = await stores.boards.create_one(
        BoardRecordCreate(name=name, title="Team", pin_hash="pbkdf2:1:00:00")
    )
    column = await stores.columns.create_one(
        ColumnRecordCreate(board_id=board.id, title="To-do", position=0)
    )
    card = await stores.cards.create_one(
        CardRecordCreate(column_id=column.id, content="Write docs", position=0)
    )
    return board, column, card


@pytest.mark.asyncio
async def test_create_assigns_ulid_and_timestamps(stores: StoreBundle) -> None:
    board, column, card = await _seed(stores)

    for entity in (board, column, card):
        assert len(entity.id) == 26
        assert entity.created_at is not None
    assert column.board_id == board.id
    assert card.column_id == column.id


@pytest.mark.asyncio
async def test_find_by_id_and_name(stores: StoreBundle) -> None:
    board, column, _ = await _seed(stores)

    assert (await stores.boards.get_by_id(board.id)).title == "Team"
    assert (await stores.boards.get_by_name("team-board")).id == board.id
    assert await stores.boards.get_by_name("Team-Board") is None
    assert await stores.columns.get_by_id("01HZX" + "0" * 21) is None
    assert (await stores.columns.get_by_id(column.id)).title == "To-do"


@pytest.mark.asyncio
async def test_find_by_parent_orders_by_position(stores: StoreBundle) -> None:
    board, _, _ = await _seed(stores)
    late = await stores.columns.create_one(
        ColumnRecordCreate(board_id=board.id, title="Done", position=5)
    )
    early = await stores.columns.create_one(
        ColumnRecordCreate(board_id=board.id, title="Backlog", position=0)
    )

    titles = [c.title for c in await stores.columns.get_by_board(board.id)]

    assert titles[-1] == late.title
    assert set(titles[:2]) == {"To-do", early.title}
    assert await stores.columns.count_by_board(board.id) == 3


@pytest.mark.asyncio
async def test_update_field_and_position(stores: StoreBundle) -> None:
    _, column, card = await _seed(stores)

    renamed = await stores.columns.update_by_id(column.id, ColumnUpdate(title="Doing"))
    moved = await stores.cards.update_position(card.id, 7)

    assert renamed.title == "Doing"
    assert renamed.position == 0
    assert moved.position == 7
    assert await stores.columns.update_by_id("01HZX" + "0" * 21, ColumnUpdate(title="x")) is None


@pytest.mark.asyncio
async def test_update_positions_applies_in_list_order(stores: StoreBundle) -> None:
    board, column, _ = await _seed(stores)
    other = await stores.columns.create_one(
        ColumnRecordCreate(board_id=board.id, title="Done", position=1)
    )

    await stores.columns.update_positions(
        [
            PositionUpdate(id=column.id, position=4),
            PositionUpdate(id=other.id, position=2),
            PositionUpdate(id=column.id, position=9),
        ]
    )

    assert (await stores.columns.get_by_id(column.id)).position == 9
    assert (await stores.columns.get_by_id(other.id)).position == 2


@pytest.mark.asyncio
async def test_move_changes_column_and_position_together(stores: StoreBundle) -> None:
    board, column, card = await _seed(stores)
    done = await stores.columns.create_one(
        ColumnRecordCreate(board_id=board.id, title="Done", position=1)
    )

    moved = await stores.cards.move(card.id, done.id, 3)

    assert (moved.column_id, moved.position) == (done.id, 3)
    assert await stores.cards.get_by_column(column.id) == []


@pytest.mark.asyncio
async def test_delete_is_idempotent(stores: StoreBundle) -> None:
    _, _, card = await _seed(stores)

    assert await stores.cards.delete_by_id(card.id) is True
    assert await stores.cards.delete_by_id(card.id) is False
    assert await stores.cards.get_by_id(card.id) is None


@pytest.mark.asyncio
async def test_delete_by_parent(stores: StoreBundle) -> None:
    board, column, _ = await _seed(stores)
    await stores.cards.create_one(CardRecordCreate(column_id=column.id, content="B", position=1))

    assert await stores.cards.delete_by_column(column.id) == 2
    assert await stores.cards.count_by_column(column.id) == 0
    assert await stores.columns.delete_by_board(board.id) == 1


@pytest.mark.asyncio
async def test_shared_store_cascades_on_board_delete(session: AsyncSession) -> None:
    stores = remote_stores(session)
    board, column, card = await _seed(stores)

    assert await BoardRepo(session).delete_by_id(board.id) is True

    assert await ColumnRepo(session).get_by_id(column.id) is None
    assert await CardRepo(session).get_by_id(card.id) is None


@pytest.mark.asyncio
async def test_local_store_does_not_cascade(local_engine: AsyncEngine) -> None:
    stores = local_stores(local_engine)
    board, column, _ = await _seed(stores)

    await stores.boards.delete_by_id(board.id)

    assert stores.boards.cascades_deletes is False
    assert (await stores.columns.get_by_id(column.id)) is not None


@pytest.mark.asyncio
async def test_local_names_are_not_unique(local_engine: AsyncEngine) -> None:
    stores = local_stores(local_engine)
    first, _, _ = await _seed(stores, name="home")
    second, _, _ = await _seed(stores, name="home")

    assert first.id != second.id
    assert len(await stores.boards.get_all()) == 2


@pytest.mark.asyncio
async def test_open_local_stores_creates_database(tmp_path) -> None:
    db_path = tmp_path / "device" / "local.db"

    stores = await open_local_stores(str(db_path))
    board, _, _ = await _seed(stores, name="home")

    assert db_path.exists()
    assert (await stores.boards.get_by_id(board.id)).name == "home"
    await stores.boards.engine.dispose()
