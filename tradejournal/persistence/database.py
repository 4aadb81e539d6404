"""Async SQLite database wrapper."""

import logging
from pathlib import Path

import aiosqlite

from tradejournal.persistence.models import SCHEMA

logger = logging.getLogger(__name__)

MEMORY = ":memory:"


class Database:
    """Async SQLite connection manager for the journal store."""

    def __init__(self, path: Path | str) -> None:
        self._path = path
        self._connection: aiosqlite.Connection | None = None

    @property
    def connection(self) -> aiosqlite.Connection:
        """Get the active database connection."""
        if self._connection is None:
            raise RuntimeError("Database not connected")
        return self._connection

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    async def connect(self) -> None:
        """Open the database connection and initialize schema."""
        if str(self._path) != MEMORY:
            Path(self._path).parent.mkdir(parents=True, exist_ok=True)
            self._connection = await aiosqlite.connect(self._path)
            await self._connection.execute("PRAGMA journal_mode=WAL")
        else:
            self._connection = await aiosqlite.connect(MEMORY)
        self._connection.row_factory = aiosqlite.Row
        await self._init_schema()
        logger.info("Database connected: %s", self._path)

    async def disconnect(self) -> None:
        """Close the database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None
            logger.info("Database disconnected")

    async def __aenter__(self) -> "Database":
        await self.connect()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.disconnect()

    async def _init_schema(self) -> None:
        """Initialize database schema."""
        for statement in SCHEMA:
            await self.connection.execute(statement)
        await self.connection.commit()
        logger.debug("Database schema initialized")

    async def execute(
        self, sql: str, parameters: tuple | dict | None = None
    ) -> aiosqlite.Cursor:
        """Execute a SQL statement."""
        if parameters is None:
            return await self.connection.execute(sql)
        return await self.connection.execute(sql, parameters)

    async def write(self, sql: str, parameters: tuple | dict | None = None) -> int:
        """Execute a single-statement write, commit it, and return the affected row count."""
        cursor = await self.execute(sql, parameters)
        rowcount = cursor.rowcount
        await self.commit()
        return rowcount

    async def fetchone(
        self, sql: str, parameters: tuple | dict | None = None
    ) -> aiosqlite.Row | None:
        """Execute a query and fetch one row."""
        cursor = await self.execute(sql, parameters)
        return await cursor.fetchone()

    async def fetchall(
        self, sql: str, parameters: tuple | dict | None = None
    ) -> list[aiosqlite.Row]:
        """Execute a query and fetch all rows."""
        cursor = await self.execute(sql, parameters)
        return await cursor.fetchall()

    async def commit(self) -> None:
        """Commit the current transaction."""
        await self.connection.commit()
