"""
PostgreSQL connection manager for the document store.

Wraps a psycopg3 connection pool. One instance is created per process by the
API lifespan (or the CLI) and passed to the repositories that need it.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from .core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class PostgresDB:
    """
    PostgreSQL connection manager with connection pooling.

    The pool is created closed; call open() (or use the first query) to
    establish connections.
    """

    def __init__(
        self,
        connection_string: Optional[str] = None,
        min_pool_size: int = 2,
        max_pool_size: int = 10,
    ):
        """
        Initialize the PostgreSQL connection manager.

        Args:
            connection_string: PostgreSQL connection URL.
            min_pool_size: Minimum connections to keep in pool.
            max_pool_size: Maximum connections in pool.
        """
        if not connection_string:
            raise ValueError(
                "DATABASE_URL environment variable required or connection_string must be provided"
            )
        self.connection_string = connection_string
        self._min_pool_size = min_pool_size
        self._max_pool_size = max(max_pool_size, min_pool_size)

        self._pool = ConnectionPool(
            self.connection_string,
            min_size=self._min_pool_size,
            max_size=self._max_pool_size,
            kwargs={"row_factory": dict_row},
            open=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "PostgresDB":
        settings = settings or get_settings()
        return cls(
            settings.db_url,
            min_pool_size=settings.database_min_pool_size,
            max_pool_size=settings.database_pool_size,
        )

    def open(self) -> None:
        """Open the pool and wait for the minimum number of connections."""
        self._pool.open(wait=True)
        logger.info(
            "Database connection pool opened (min_size=%d, max_size=%d)",
            self._min_pool_size,
            self._max_pool_size,
        )

    @contextmanager
    def get_connection(self) -> Iterator[psycopg.Connection]:
        """Get a connection from the pool."""
        if self._pool.closed:
            self.open()
        with self._pool.connection() as conn:
            yield conn

    @contextmanager
    def transaction(self) -> Iterator[psycopg.Connection]:
        """
        Execute queries within a transaction.

        Automatically commits on success, rolls back on failure.
        """
        with self.get_connection() as conn:
            try:
                yield conn
                conn.commit()
            except Exception:
                conn.rollback()
                raise

    def execute(self, query: Any, params: tuple = ()) -> int:
        """Execute a single query. Returns the affected row count."""
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                rowcount = cur.rowcount
            conn.commit()
        return rowcount

    def executemany(self, query: Any, params_list: list[tuple]) -> None:
        """Execute a query with multiple parameter sets."""
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                cur.executemany(query, params_list)
            conn.commit()

    def executescript(self, sql: str) -> None:
        """Execute a SQL script (multiple statements)."""
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(sql)
            conn.commit()

    def fetchone(self, query: Any, params: tuple = ()) -> Optional[dict[str, Any]]:
        """Execute a query and fetch one result as a dict."""
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                row = cur.fetchone()
                return dict(row) if row else None

    def fetchall(self, query: Any, params: tuple = ()) -> list[dict[str, Any]]:
        """Execute a query and fetch all results as dicts."""
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                return [dict(row) for row in cur.fetchall()]

    def ping(self) -> bool:
        """Check connectivity with a trivial query."""
        row = self.fetchone("SELECT 1 AS ok")
        return bool(row and row["ok"] == 1)

    def close(self) -> None:
        """Close the connection pool."""
        self._pool.close()
