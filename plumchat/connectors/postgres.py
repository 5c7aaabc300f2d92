"""
PostgreSQL/Greenplum connection provider backed by an asyncpg pool.

Usage:
    connector = PostgresConnector(
        host="gp-master",
        port=5432,
        database="warehouse",
        user="gpadmin",
        password="secret",
    )

    async with connector:
        async with connector.acquire() as conn:
            rows = await conn.fetch("SELECT 1")
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import asyncpg

from plumchat.connectors.base import BaseConnector, ConnectionFailedError

logger = logging.getLogger(__name__)

_ACQUIRE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)


class PostgresConnector(BaseConnector):
    """asyncpg pool; one pooled connection per ``acquire()`` block."""

    async def connect(self) -> None:
        """
        Create the pool and probe the server with ``SELECT version()``.

        Raises:
            ConnectionFailedError: If the pool cannot be created or the probe fails
        """
        if self._connected and self._pool:
            return

        logger.info(f"Opening PostgreSQL pool for {self.dsn_label} (max {self.pool_size})")
        pool = None
        try:
            pool = await asyncpg.create_pool(
                host=self.host,
                port=self.port,
                database=self.database,
                user=self.user,
                password=self.password,
                min_size=1,
                max_size=self.pool_size,
                command_timeout=self.timeout,
                **self.kwargs,
            )
            server_version = await pool.fetchval("SELECT version()")
        except asyncpg.PostgresError as e:
            if pool is not None:
                await pool.close()
            logger.error(f"PostgreSQL refused connection to {self.dsn_label}: {e}")
            raise ConnectionFailedError(f"Failed to connect to PostgreSQL: {e}") from e
        except Exception as e:
            if pool is not None:
                await pool.close()
            logger.error(f"Could not reach {self.host}:{self.port}: {e}")
            raise ConnectionFailedError(f"Connection error: {e}") from e

        self._pool = pool
        self._connected = True
        logger.info(f"Connected: {str(server_version).split(',')[0]}")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        """
        Check out one pooled connection, waiting at most ``timeout`` seconds.

        Raises:
            ConnectionFailedError: If not connected or the pool is exhausted
        """
        if not self._connected or not self._pool:
            raise ConnectionFailedError("Not connected to database. Call connect() first.")

        pool = self._pool
        try:
            conn = await pool.acquire(timeout=self.timeout)
        except _ACQUIRE_ERRORS as e:
            logger.error(f"Connection checkout failed: {e}")
            raise ConnectionFailedError(f"Failed to acquire connection: {e}") from e

        try:
            yield conn
        finally:
            await pool.release(conn)

    async def close(self) -> None:
        if self._pool is None:
            return

        pool, self._pool = self._pool, None
        self._connected = False
        await pool.close()
        logger.info(f"Closed PostgreSQL pool for {self.dsn_label}")
