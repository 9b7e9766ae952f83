"""PostgreSQL database client for the local entity store backend.

Every ``transaction()`` block runs on one pooled connection and commits on a
clean exit, so a multi-statement check-then-write sequence is atomic.
"""
from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Any, Generator

from psycopg2 import pool
from psycopg2.extras import RealDictCursor

logger = logging.getLogger(__name__)


class PostgresClient:
    """PostgreSQL database client with connection pooling."""

    def __init__(self) -> None:
        try:
            self._pool = pool.ThreadedConnectionPool(
                minconn=1,
                maxconn=int(os.getenv("POSTGRES_POOL_SIZE", "10")),
                host=os.getenv("POSTGRES_HOST", "localhost"),
                port=int(os.getenv("POSTGRES_PORT", "5432")),
                database=os.getenv("POSTGRES_DB", "sponsorsync"),
                user=os.getenv("POSTGRES_USER", "sponsorsync"),
                password=os.getenv("POSTGRES_PASSWORD", "sponsorsync_dev_password"),
            )
        except Exception as exc:  # pragma: no cover
            raise RuntimeError(f"Failed to initialize PostgreSQL connection pool: {exc}") from exc

    @contextmanager
    def transaction(self) -> Generator[Any, None, None]:
        """Yield a dict cursor whose statements share a single transaction.

        Commits when the block exits normally and rolls back on any exception.
        """
        conn = self._pool.getconn()
        try:
            cursor = conn.cursor(cursor_factory=RealDictCursor)
            try:
                yield cursor
            finally:
                cursor.close()
            conn.commit()
        except Exception:
            conn.rollback()
            logger.debug("transaction rolled back")
            raise
        finally:
            self._pool.putconn(conn)

    def execute_one(self, query: str, params: tuple = ()) -> dict[str, Any] | None:
        """Execute a query and return a single row as a dict, or None."""
        with self.transaction() as cursor:
            cursor.execute(query, params)
            result = cursor.fetchone()
            return dict(result) if result else None

    def execute_many(self, query: str, params: tuple = ()) -> list[dict[str, Any]]:
        """Execute a query and return all rows as dicts."""
        with self.transaction() as cursor:
            cursor.execute(query, params)
            return [dict(row) for row in cursor.fetchall()]

    def close(self) -> None:
        """Close all connections in the pool."""
        self._pool.closeall()


# Singleton instance
_POSTGRES_CLIENT: PostgresClient | None = None


def get_postgres_client() -> PostgresClient | None:
    """Get PostgreSQL client singleton.

    Returns:
        PostgresClient instance if USE_LOCAL_DB=1, None otherwise.
    """
    global _POSTGRES_CLIENT
    if os.getenv("USE_LOCAL_DB", "0") != "1":
        return None
    if _POSTGRES_CLIENT is None:
        _POSTGRES_CLIENT = PostgresClient()
    return _POSTGRES_CLIENT
