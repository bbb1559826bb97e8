# chat_ai/services/infrastructure/redis_client.py
"""
Pooled async Redis client used as the proactive result cache backend.

Cache traffic must never fail a request, so every data operation is guarded:
errors are logged and reported as a miss (``None``) or ``False``.
"""

from collections.abc import Awaitable, Callable
from typing import TypeVar

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool

from chat_ai.config import settings
from chat_ai.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

MAX_CONNECTIONS = 20


class FastRedisClient:
    def __init__(self, url: str | None = None):
        self.url = url
        self.pool: ConnectionPool | None = None
        self.client: redis.Redis | None = None

    @property
    def initialized(self) -> bool:
        return self.client is not None

    async def initialize(self) -> None:
        """Create the pool and verify it with a PING."""
        if self.initialized:
            return

        redis_url = self.url or settings.REDIS_URL
        pool = ConnectionPool.from_url(
            redis_url,
            max_connections=MAX_CONNECTIONS,
            retry_on_timeout=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            health_check_interval=30,
            decode_responses=True,
        )
        client = redis.Redis(connection_pool=pool)

        try:
            await client.ping()
        except redis.RedisError as e:
            logger.error("Redis connection failed", error=str(e))
            await pool.disconnect()
            raise RuntimeError("Redis initialization failed") from e

        self.pool, self.client = pool, client
        logger.info("Redis client initialized", max_connections=MAX_CONNECTIONS)

    async def close(self) -> None:
        if not self.initialized:
            return
        try:
            await self.client.aclose()
            await self.pool.disconnect()
            logger.info("Redis client closed")
        except redis.RedisError as e:
            logger.error("Error closing Redis client", error=str(e))
        finally:
            self.pool = self.client = None

    async def _guarded(
        self, operation: str, key: str | None, call: Callable[[], Awaitable[T]], default: T
    ) -> T:
        try:
            if not self.initialized:
                logger.warning("Redis not initialized, connecting lazily")
                await self.initialize()
            return await call()
        except (redis.RedisError, RuntimeError) as e:
            logger.error(
                "Redis operation failed",
                operation=operation,
                key=key[:40] if key else None,
                error=str(e),
            )
            return default

    async def ping(self) -> bool:
        return bool(await self._guarded("PING", None, lambda: self.client.ping(), False))

    async def get(self, key: str) -> str | None:
        value = await self._guarded("GET", key, lambda: self.client.get(key), None)
        return value or None

    async def set_with_ttl(self, key: str, value: str, ttl_s: int | None = None) -> bool:
        async def _set():
            if ttl_s:
                return await self.client.setex(key, ttl_s, value)
            return await self.client.set(key, value)

        return bool(await self._guarded("SET", key, _set, False))

    async def delete(self, key: str) -> bool:
        return bool(await self._guarded("DEL", key, lambda: self.client.delete(key), False))


# Global instance, initialized in the application lifespan
fast_redis = FastRedisClient()
