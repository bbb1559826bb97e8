"""
Redis-backed cache for proactive assistant results.

Results are a pure function of the message window, so they are stored
verbatim under ``proactive:<conversation_id>:<limit>``. Cache problems never
fail a request: reads degrade to a miss and writes to a no-op.
"""

import json
from typing import Any, Protocol

from chat_ai.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

CACHE_PREFIX = "proactive"


class KeyValueStore(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set_with_ttl(self, key: str, value: str, ttl_s: int | None = None) -> bool: ...

    async def delete(self, key: str) -> bool: ...


def cache_key(conversation_id: str, limit: int) -> str:
    return f"{CACHE_PREFIX}:{conversation_id}:{limit}"


class ProactiveResultCache:
    def __init__(self, store: KeyValueStore, ttl_seconds: int = 3600):
        self.store = store
        self.ttl_seconds = ttl_seconds

    async def get(self, conversation_id: str, limit: int) -> dict[str, Any] | None:
        key = cache_key(conversation_id, limit)
        raw = await self.store.get(key)
        if not raw:
            logger.debug("Proactive cache miss", key=key)
            return None

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Discarding unreadable cache entry", key=key, error=str(e))
            await self.store.delete(key)
            return None

        logger.debug("Proactive cache hit", key=key)
        return payload

    async def set(self, conversation_id: str, limit: int, payload: dict[str, Any]) -> bool:
        key = cache_key(conversation_id, limit)
        stored = await self.store.set_with_ttl(key, json.dumps(payload), self.ttl_seconds)
        if not stored:
            logger.warning("Failed to cache proactive result", key=key)
        return stored
