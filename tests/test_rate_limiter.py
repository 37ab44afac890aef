import pytest
from fakeredis import FakeAsyncRedis
from redis.exceptions import ConnectionError as RedisConnectionError

from nokanban.core.constants import RateLimitPrefix
from nokanban.core.exceptions.domain import RateLimitError
from nokanban.services.rate_limiter import RateLimiter


def test_keys() -> None:
    assert RateLimiter.client_key(RateLimitPrefix.CREATE_BOARD, "1.2.3.4") == "create_board:1.2.3.4"
    assert RateLimiter.board_key("B1", "1.2.3.4") == "board_rl:B1:1.2.3.4"


@pytest.mark.asyncio
async def test_hit_counts_until_limit(rate_limiter: RateLimiter, fake_redis: FakeAsyncRedis) -> None:
    assert await rate_limiter.hit("k", limit=2, window_seconds=60) == 1
    assert await rate_limiter.hit("k", limit=2, window_seconds=60) == 2

    with pytest.raises(RateLimitError) as exc_info:
        await rate_limiter.hit("k", limit=2, window_seconds=60)

    assert exc_info.value.retry_after == 60
    assert await fake_redis.get("k") == "2"


@pytest.mark.asyncio
async def test_first_hit_sets_window_ttl(rate_limiter: RateLimiter, fake_redis: FakeAsyncRedis) -> None:
    await rate_limiter.hit("k", limit=5, window_seconds=900)
    await rate_limiter.hit("k", limit=5, window_seconds=900)

    assert 0 < await fake_redis.ttl("k") <= 900


@pytest.mark.asyncio
async def test_keys_are_counted_separately(rate_limiter: RateLimiter) -> None:
    await rate_limiter.hit("a", limit=1, window_seconds=60)

    assert await rate_limiter.hit("b", limit=1, window_seconds=60) == 1


class _BrokenRedis:
    async def get(self, key):
        raise RedisConnectionError("down")


@pytest.mark.asyncio
async def test_fails_open_when_redis_is_down() -> None:
    limiter = RateLimiter(client=_BrokenRedis())

    assert await limiter.hit("k", limit=1, window_seconds=60) == 0
