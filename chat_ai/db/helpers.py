# chat_ai/db/helpers.py
"""
Query helpers shared by repositories.
"""

from typing import Any

import psycopg

from chat_ai.db.pool import db_pool
from chat_ai.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class DatabaseError(Exception):
    """A query could not be executed."""

    def __init__(self, message: str, operation: str = "unknown", recoverable: bool = True):
        super().__init__(message)
        self.operation = operation
        self.recoverable = recoverable


async def fetch_all(
    query: str, params: tuple = (), *, connection: psycopg.AsyncConnection | None = None
) -> list[dict[str, Any]]:
    """
    Run ``query`` and return every row as a dict.

    Uses ``connection`` when given, otherwise borrows one from the pool.

    Raises:
        DatabaseError: On any driver error or when the pool is unavailable
    """
    try:
        if connection is not None:
            cursor = await connection.execute(query, params)
            return await cursor.fetchall()

        async with db_pool.connection() as conn:
            cursor = await conn.execute(query, params)
            return await cursor.fetchall()

    except (psycopg.Error, RuntimeError) as e:
        logger.error("Database fetch_all error", query=query.strip()[:100], error=str(e))
        raise DatabaseError(f"Query failed: {e}", operation="fetch_all") from e
