"""Shared fixtures: in-memory shared and local stores, fast PIN hashing."""

import os

# Must be set before nokanban.core.config is first imported
os.environ.setdefault("DB_PATH", ":memory:")
os.environ.setdefault("PIN_ITERATIONS", "1000")

import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from nokanban.core.security import Pbkdf2PinHasher
from nokanban.models.db import build_engine, build_session_factory, create_tables
from nokanban.models.local import create_local_tables
from nokanban.repos.stores import local_stores, remote_stores
from nokanban.services.board_service import BoardMutationService
from nokanban.services.rate_limiter import RateLimiter

MEMORY_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def hasher() -> Pbkdf2PinHasher:
    return Pbkdf2PinHasher(iterations=1000)


@pytest_asyncio.fixture
async def engine() -> AsyncEngine:
    engine = build_engine(MEMORY_URL)
    await create_tables(bind=engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def session(session_maker) -> AsyncSession:
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def local_engine() -> AsyncEngine:
    engine = build_engine(MEMORY_URL)
    await create_local_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def remote_service(session: AsyncSession, hasher) -> BoardMutationService:
    return BoardMutationService(remote_stores(session), hasher=hasher)


@pytest.fixture
def local_service(local_engine: AsyncEngine, hasher) -> BoardMutationService:
    return BoardMutationService(local_stores(local_engine), hasher=hasher)


@pytest.fixture(params=["remote", "local"])
def service(request) -> BoardMutationService:
    """The mutation service over each store backend in turn."""
    return request.getfixturevalue(f"{request.param}_service")


@pytest_asyncio.fixture
async def fake_redis() -> FakeAsyncRedis:
    client = FakeAsyncRedis(decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
def rate_limiter(fake_redis: FakeAsyncRedis) -> RateLimiter:
    return RateLimiter(client=fake_redis)
