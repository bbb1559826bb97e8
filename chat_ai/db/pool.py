# chat_ai/db/pool.py
"""
PostgreSQL connection pool for the message store (psycopg_pool).

Connections are autocommit, return rows as dicts and run in UTC with a
statement timeout; the AI endpoints only ever read.
"""

import asyncio
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import psycopg
from psycopg import sql
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from chat_ai.config import settings
from chat_ai.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

CLOSE_TIMEOUT_SECONDS = 30.0


async def _configure_connection(conn: psycopg.AsyncConnection) -> None:
    conn.row_factory = dict_row
    await conn.set_autocommit(True)
    app_name = f"chat-ai-{settings.environment}"
    await conn.execute(sql.SQL("SET application_name = {}").format(sql.Literal(app_name)))
    await conn.execute("SET timezone = 'UTC'")
    await conn.execute("SET statement_timeout = '30s'")


class DatabasePoolManager:
    """Owns one AsyncConnectionPool for the lifetime of the application."""

    def __init__(self, conninfo: str | None = None):
        self.conninfo = conninfo
        self.pool: AsyncConnectionPool | None = None
        self._closed = False

    @property
    def initialized(self) -> bool:
        return self.pool is not None and not self._closed

    async def initialize(self) -> None:
        if self.initialized:
            logger.warning("Database pool already initialized")
            return
        if self._closed:
            raise RuntimeError("Cannot reinitialize closed pool")

        options = settings.get_db_pool_config()
        pool = AsyncConnectionPool(
            conninfo=self.conninfo or settings.DATABASE_URL,
            open=False,
            check=AsyncConnectionPool.check_connection,
            configure=_configure_connection,
            **options,
        )
        try:
            await pool.open(wait=True, timeout=options["timeout"])
        except Exception as e:
            logger.error("Failed to initialize database pool", error=str(e))
            await pool.close()
            raise RuntimeError(f"Database pool initialization failed: {e}") from e

        self.pool = pool
        logger.info(
            "Database pool initialized", min_size=options["min_size"], max_size=options["max_size"]
        )

    async def close(self) -> None:
        if not self.initialized:
            return
        self._closed = True
        try:
            await asyncio.wait_for(self.pool.close(), timeout=CLOSE_TIMEOUT_SECONDS)
            logger.info("Database pool closed")
        except TimeoutError:
            logger.warning("Database pool close timed out, forcing shutdown")

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[psycopg.AsyncConnection]:
        """
        Borrow a pooled connection.

        Usage:
            async with db_pool.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute("SELECT 1")
        """
        if not self.initialized:
            raise RuntimeError("Database pool not initialized. Call initialize() first.")
        async with self.pool.connection() as conn:
            yield conn

    async def health_check(self) -> dict[str, Any]:
        """Run ``SELECT 1`` on a pooled connection."""
        if not self.initialized:
            return {"healthy": False, "service": "database_pool", "error": "Pool not initialized"}

        start_time = time.perf_counter()
        try:
            async with self.connection() as conn:
                await conn.execute("SELECT 1")
        except (psycopg.Error, RuntimeError) as e:
            logger.error("Database pool health check failed", error=str(e))
            return {
                "healthy": False,
                "service": "database_pool",
                "error": str(e),
                "error_type": type(e).__name__,
            }

        stats = self.pool.get_stats()
        return {
            "healthy": True,
            "service": "database_pool",
            "connection_time_ms": round((time.perf_counter() - start_time) * 1000, 2),
            "pool_size": stats.get("pool_size", 0),
            "pool_available": stats.get("pool_available", 0),
        }


# Global pool instance
db_pool = DatabasePoolManager()


async def db_health_check() -> dict[str, Any]:
    return await db_pool.health_check()
