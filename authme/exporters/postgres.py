"""PostgreSQL exporter for session events."""

from __future__ import annotations

import asyncio
from typing import Optional

import asyncpg

from ..session.events import SessionEvent
from .base import Exporter


CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS authme_session_events (
    event_id uuid PRIMARY KEY,
    kind text NOT NULL,
    display_name text NOT NULL,
    account_id text,
    account_type text,
    status text,
    success boolean NOT NULL,
    error text,
    occurred_at timestamp NOT NULL
)
"""

INSERT_SQL = """
INSERT INTO authme_session_events (
    event_id,
    kind,
    display_name,
    account_id,
    account_type,
    status,
    success,
    error,
    occurred_at
)
VALUES ($1::uuid, $2, $3, $4, $5, $6, $7, $8, $9)
"""


class PostgresExporter(Exporter):
    """Exporter that persists session events into PostgreSQL using ``asyncpg``."""

    def __init__(
        self,
        dsn: Optional[str] = None,
        *,
        pool: Optional[asyncpg.Pool] = None,
        min_size: int = 1,
        max_size: int = 4,
        create_table: bool = True,
    ) -> None:
        self._dsn = dsn
        self._pool = pool
        self._min_size = min_size
        self._max_size = max_size
        self._create_table = create_table
        self._table_ready = False
        self._connect_lock: Optional[asyncio.Lock] = None

    async def connect(self) -> None:
        """Initialize a connection pool if one was not supplied.

        Concurrent first exports share one pool and one table check.
        """
        if self._connect_lock is None:
            self._connect_lock = asyncio.Lock()

        async with self._connect_lock:
            if self._pool is None:
                if not self._dsn:
                    raise ValueError("Either `dsn` or `pool` must be provided for PostgresExporter.")
                self._pool = await asyncpg.create_pool(
                    dsn=self._dsn,
                    min_size=self._min_size,
                    max_size=self._max_size,
                )

            if self._create_table and not self._table_ready:
                async with self._pool.acquire() as conn:
                    await conn.execute(CREATE_TABLE_SQL)
                self._table_ready = True

    async def export(self, event: SessionEvent) -> None:
        """Insert one session event."""
        if self._pool is None or (self._create_table and not self._table_ready):
            await self.connect()

        assert self._pool is not None
        payload = event.to_dict()

        async with self._pool.acquire() as conn:
            await conn.execute(
                INSERT_SQL,
                payload["event_id"],
                payload["kind"],
                payload["display_name"],
                payload["account_id"],
                payload["account_type"],
                payload["status"],
                payload["success"],
                payload["error"],
                payload["occurred_at"],
            )

    async def close(self) -> None:
        """Close the underlying pool if it exists."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            self._table_ready = False
        self._connect_lock = None
