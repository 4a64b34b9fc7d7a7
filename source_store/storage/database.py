"""
PostgreSQL database connection management.

Uses asyncpg for async database operations. The pool is created lazily on
first use and recreated if it has been closed. Every statement acquires its
own connection from the pool and releases it on all exit paths.

asyncpg and socket failures are translated into the storage error taxonomy:
DatabaseConnectionError when a connection cannot be obtained, and
PersistenceError when a statement is sent and rejected.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from types import TracebackType
from typing import Any

import asyncpg

from source_store.config.settings import get_settings
from source_store.storage.errors import DatabaseConnectionError, PersistenceError

logger = logging.getLogger(__name__)

# Unreachable host, bad credentials, missing database
_CONNECT_ERRORS = (
    OSError,
    asyncio.TimeoutError,
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
)

# Constraint violations, bad SQL, missing table, connection lost mid-statement
_STATEMENT_ERRORS = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
    asyncio.TimeoutError,
)


class Database:
    """
    Async PostgreSQL database connection manager.

    Usage:
        db = Database()

        row = await db.fetchrow("SELECT * FROM source WHERE id = $1", 1)

        await db.close()

    ``connect()`` may be called explicitly, but any statement helper will
    establish the pool on demand.
    """

    def __init__(
        self,
        database_url: str | None = None,
        min_size: int | None = None,
        max_size: int | None = None,
        command_timeout: float | None = None,
        ssl: bool | None = None,
        timezone: str | None = None,
    ):
        """
        Initialize database connection manager.

        Args:
            database_url: PostgreSQL connection URL
            min_size: Minimum pool size
            max_size: Maximum pool size
            command_timeout: Per-statement timeout in seconds
            ssl: Require an encrypted connection
            timezone: Session timezone sent to the server
        """
        settings = get_settings()

        self._database_url = database_url or str(settings.database_url)
        self._min_size = min_size or settings.db_pool_min_size
        self._max_size = max_size or settings.db_pool_max_size
        self._command_timeout = command_timeout or settings.db_command_timeout
        self._ssl = settings.db_ssl if ssl is None else ssl
        self._timezone = timezone or settings.db_timezone

        self._pool: asyncpg.Pool | None = None
        self._connect_lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        """True when a usable pool exists."""
        return self._pool is not None and not self._pool.is_closing()

    async def connect(self) -> None:
        """
        Establish the connection pool if it is missing or closed.

        Raises:
            DatabaseConnectionError: server unreachable, credentials
                rejected, or database does not exist
        """
        if self.is_connected:
            return

        async with self._connect_lock:
            if self.is_connected:
                return

            try:
                self._pool = await asyncpg.create_pool(
                    self._database_url,
                    min_size=self._min_size,
                    max_size=self._max_size,
                    command_timeout=self._command_timeout,
                    ssl="require" if self._ssl else None,
                    server_settings={"timezone": self._timezone},
                )
            except _CONNECT_ERRORS as e:
                logger.error(f"Failed to connect to database: {e}")
                raise DatabaseConnectionError(
                    f"Failed to connect to database: {e}",
                    operation="connect",
                ) from e

            logger.info(
                f"Database connected (pool: {self._min_size}-{self._max_size})"
            )

    async def close(self) -> None:
        """Close database connection pool."""
        if self._pool:
            await self._pool.close()
            self._pool = None
            logger.info("Database connection closed")

    async def __aenter__(self) -> "Database":
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    @property
    def pool(self) -> asyncpg.Pool:
        """Get connection pool, raising if not connected."""
        if self._pool is None:
            raise DatabaseConnectionError(
                "Database not connected. Call connect() first.",
                operation="pool",
            )
        return self._pool

    @asynccontextmanager
    async def acquire(
        self,
        operation: str | None = None,
        key: Any = None,
    ) -> AsyncIterator[asyncpg.Connection]:
        """
        Acquire a connection from the pool, connecting first if needed.

        The connection is released when the block exits, whether or not
        it raised.

        Usage:
            async with db.acquire() as conn:
                await conn.execute("...")
        """
        await self.connect()
        pool = self.pool

        try:
            conn = await pool.acquire()
        except _CONNECT_ERRORS as e:
            raise DatabaseConnectionError(
                f"Could not acquire a database connection: {e}",
                operation=operation,
                key=key,
            ) from e

        try:
            yield conn
        finally:
            await pool.release(conn)

    async def _run(
        self,
        method: str,
        query: str,
        args: tuple[Any, ...],
        operation: str | None,
        key: Any,
    ) -> Any:
        async with self.acquire(operation=operation, key=key) as conn:
            try:
                return await getattr(conn, method)(query, *args)
            except _STATEMENT_ERRORS as e:
                label = operation or method
                if key is not None:
                    label = f"{label} (key={key!r})"
                raise PersistenceError(
                    f"{label} failed: {e}",
                    operation=operation,
                    key=key,
                ) from e

    async def execute(
        self,
        query: str,
        *args: Any,
        operation: str | None = None,
        key: Any = None,
    ) -> str:
        """
        Execute a query without returning results.

        Args:
            query: SQL query
            *args: Query parameters
            operation: Logical operation name, attached to errors
            key: Key the operation targets, attached to errors

        Returns:
            Status string from PostgreSQL (e.g. ``"UPDATE 1"``)
        """
        return await self._run("execute", query, args, operation, key)

    async def fetch(
        self,
        query: str,
        *args: Any,
        operation: str | None = None,
        key: Any = None,
    ) -> list[asyncpg.Record]:
        """
        Execute a query and fetch all results.

        Returns:
            List of records
        """
        return await self._run("fetch", query, args, operation, key)

    async def fetchrow(
        self,
        query: str,
        *args: Any,
        operation: str | None = None,
        key: Any = None,
    ) -> asyncpg.Record | None:
        """
        Execute a query and fetch one result.

        Returns:
            Single record or None
        """
        return await self._run("fetchrow", query, args, operation, key)

    async def fetchval(
        self,
        query: str,
        *args: Any,
        operation: str | None = None,
        key: Any = None,
    ) -> Any:
        """
        Execute a query and fetch a single value.

        Returns:
            Single value
        """
        return await self._run("fetchval", query, args, operation, key)

    async def health_check(self) -> bool:
        """
        Check if database is healthy.

        Returns:
            True if database is accessible
        """
        try:
            result = await self.fetchval("SELECT 1", operation="health_check")
            return result == 1
        except (DatabaseConnectionError, PersistenceError) as e:
            logger.warning(f"Database health check failed: {e}")
            return False


# Global database instance
_database: Database | None = None


async def get_database() -> Database:
    """
    Get global database instance.

    Creates it if needed. The pool is established by the first statement.

    Returns:
        Shared Database instance
    """
    global _database

    if _database is None:
        _database = Database()

    return _database


async def close_database() -> None:
    """Close global database connection."""
    global _database

    if _database is not None:
        await _database.close()
        _database = None
