import redis.asyncio as aioredis
from loguru import logger
from redis.exceptions import RedisError

from nokanban.core.config import get_settings
from nokanban.core.constants import RateLimitPrefix
from nokanban.core.exceptions.domain import RateLimitError


class RateLimiter:
    """Fixed-window request counter in Redis. Fails open when Redis is unreachable."""

    def __init__(self, client: aioredis.Redis | None = None):
        settings = get_settings()
        self._redis_url = settings.redis_url
        self._client = client

    def _get_client(self) -> aioredis.Redis:
        """Use the injected client, or a fresh one per call to avoid event loop issues."""
        if self._client is not None:
            return self._client
        return aioredis.from_url(self._redis_url, decode_responses=True)

    @staticmethod
    def client_key(prefix: str, client_ip: str) -> str:
        return f"{prefix}:{client_ip}"

    @staticmethod
    def board_key(board_id: str, client_ip: str) -> str:
        return f"{RateLimitPrefix.BOARD}:{board_id}:{client_ip}"

    async def hit(self, key: str, *, limit: int, window_seconds: int) -> int:
        """Count one request against ``key``. Returns the new count.

        Raises:
            RateLimitError: If ``limit`` requests were already made in this window.
        """
        client = self._get_client()
        try:
            current = await client.get(key)
            count = int(current) if current else 0
            if count >= limit:
                raise RateLimitError(retry_after=window_seconds)

            count = await client.incr(key)
            if count == 1:
                await client.expire(key, window_seconds)
            return count
        except RedisError as e:
            logger.warning(f"Redis rate limit check failed (key={key}): {e}")
            return 0
        finally:
            if client is not self._client:
                await client.aclose()


# Singleton
_rate_limiter: RateLimiter | None = None


def get_rate_limiter() -> RateLimiter:
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = RateLimiter()
    return _rate_limiter
