"""
Async SQLite connection pool with aiosqlite.

Provides connection management with proper async context handling.

Mutating use cases run inside ``write_transaction()``, which opens a
``BEGIN IMMEDIATE`` transaction. SQLite admits one writer at a time, so the
read-check-write of stock and batch quantities is serialized. While it is
open, ``get_connection()`` and ``get_transaction()`` in the same task reuse
its connection so that every store call joins the same unit of work.
"""

import asyncio
import sqlite3
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from pathlib import Path

import aiosqlite

from printledger.config import get_logger, get_settings
from printledger.core.exceptions import ConcurrentModificationError

logger = get_logger(__name__)

# Connection of the write transaction open in the current task, if any
_ambient: ContextVar[aiosqlite.Connection | None] = ContextVar(
    "printledger_ambient_connection", default=None
)


class ConnectionPool:
    """
    Async SQLite connection pool.

    Manages a pool of connections with configurable size.
    """

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
    ):
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout

        self._pool: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=pool_size)
        self._connections: list[aiosqlite.Connection] = []
        self._initialized = False
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Initialize the connection pool."""
        async with self._lock:
            if self._initialized:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            for _ in range(self.pool_size):
                conn = await self._create_connection()
                self._connections.append(conn)
                await self._pool.put(conn)

            self._initialized = True
            logger.info(
                "connection_pool_initialized",
                db_path=str(self.db_path),
                pool_size=self.pool_size,
            )

    async def _create_connection(self) -> aiosqlite.Connection:
        """Create a new database connection with optimized settings."""
        conn = await aiosqlite.connect(self.db_path)

        # WAL lets readers proceed while a writer holds the lock
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA synchronous=NORMAL")
        await conn.execute(f"PRAGMA busy_timeout={self.busy_timeout}")
        await conn.execute("PRAGMA foreign_keys=ON")

        conn.row_factory = aiosqlite.Row

        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Acquire a connection from the pool.

        Usage:
            async with pool.acquire() as conn:
                await conn.execute(...)
        """
        if not self._initialized:
            await self.initialize()

        conn = await self._pool.get()
        try:
            yield conn
        finally:
            await self._pool.put(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Acquire a connection with transaction context.

        Automatically commits on success, rolls back on exception.
        """
        async with self.acquire() as conn:
            try:
                yield conn
                await conn.commit()
            except Exception:
                await conn.rollback()
                raise

    @asynccontextmanager
    async def write_transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Acquire a connection holding SQLite's write lock.

        ``BEGIN IMMEDIATE`` takes the reserved lock up front, waiting up to
        ``busy_timeout``. A lock timeout surfaces as
        ConcurrentModificationError; any exception rolls the whole unit back.
        """
        async with self.acquire() as conn:
            try:
                await conn.execute("BEGIN IMMEDIATE")
            except sqlite3.OperationalError as e:
                if _is_lock_error(e):
                    logger.warning("write_lock_timeout", db_path=str(self.db_path))
                    raise ConcurrentModificationError(
                        "database", self.db_path.name, reason=str(e)
                    ) from e
                raise

            token = _ambient.set(conn)
            try:
                yield conn
                await conn.commit()
            except sqlite3.OperationalError as e:
                await conn.rollback()
                if _is_lock_error(e):
                    raise ConcurrentModificationError(
                        "database", self.db_path.name, reason=str(e)
                    ) from e
                raise
            except BaseException:
                await conn.rollback()
                raise
            finally:
                _ambient.reset(token)

    async def close(self) -> None:
        """Close all connections in the pool."""
        async with self._lock:
            for conn in self._connections:
                await conn.close()
            self._connections.clear()
            self._initialized = False
            logger.info("connection_pool_closed")


def _is_lock_error(error: sqlite3.OperationalError) -> bool:
    message = str(error).lower()
    return "locked" in message or "busy" in message


# Global connection pool
_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Get or create the global connection pool."""
    global _pool
    if _pool is None:
        settings = get_settings()
        _pool = ConnectionPool(
            db_path=settings.storage.db_path,
            pool_size=settings.storage.pool_size,
            busy_timeout=settings.storage.busy_timeout,
        )
        await _pool.initialize()
    return _pool


async def close_pool() -> None:
    """Close the global connection pool."""
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    """
    Get a connection from the global pool.

    Inside a write transaction this is the transaction's own connection,
    so reads see the uncommitted writes of the same unit of work.
    """
    conn = _ambient.get()
    if conn is not None:
        yield conn
        return

    pool = await get_pool()
    async with pool.acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    """
    Get a connection with transaction context.

    Joins the enclosing write transaction if there is one; commit and
    rollback are then left to it.
    """
    conn = _ambient.get()
    if conn is not None:
        yield conn
        return

    pool = await get_pool()
    async with pool.transaction() as conn:
        yield conn


@asynccontextmanager
async def write_transaction() -> AsyncIterator[aiosqlite.Connection]:
    """
    Run a block as one serialized, atomic unit of work.

    Nested calls join the outer transaction.
    """
    conn = _ambient.get()
    if conn is not None:
        yield conn
        return

    pool = await get_pool()
    async with pool.write_transaction() as conn:
        yield conn
