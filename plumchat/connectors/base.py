"""
Connection provider contract and the PlumChat error hierarchy.

Every component (query executor, catalog introspector, tools) is handed a
connector explicitly; there is no process-wide database handle.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Any

logger = logging.getLogger(__name__)


# ============================================================================
# Errors
# ============================================================================


class ConnectorError(Exception):
    """Root of all PlumChat database errors."""

    pass


class InvalidInputError(ConnectorError, ValueError):
    """A required argument was missing or empty."""

    pass


class RejectedOperationError(ConnectorError):
    """Statement is not a read-only query."""

    pass


class ConnectionFailedError(ConnectorError):
    """No connection could be opened or checked out."""

    pass


class QueryFailedError(ConnectorError):
    """The database rejected or failed a statement."""

    pass


class SchemaError(QueryFailedError):
    """A catalog metadata query failed."""

    pass


class TableNotFoundError(ConnectorError):
    """Catalog lookup returned no matching table or view."""

    def __init__(self, schema: str, table: str):
        self.schema = schema
        self.table = table
        super().__init__(f"Table {schema}.{table} not found")


# ============================================================================
# Base Connector
# ============================================================================


class BaseConnector(ABC):
    """
    Pooled connection provider.

    Components never hold a connection between calls: they enter
    ``acquire()`` for exactly one unit of work and the provider releases the
    connection when the block exits, however it exits.

    Usage:
        connector = PostgresConnector(host="gp-master", database="warehouse", ...)
        await connector.connect()

        async with connector.acquire() as conn:
            version = await conn.fetchval("SELECT version()")

        await connector.close()
    """

    def __init__(
        self,
        host: str,
        port: int,
        database: str,
        user: str,
        password: str,
        pool_size: int = 10,
        timeout: int = 30,
        **kwargs,
    ):
        """
        Args:
            host: Server host name
            port: Server port
            database: Database to open
            user: Login role
            password: Login password
            pool_size: Upper bound on pooled connections
            timeout: Seconds for connection checkout and the default statement timeout
            **kwargs: Passed through to the driver's pool factory
        """
        self.host = host
        self.port = port
        self.database = database
        self.user = user
        self.password = password
        self.pool_size = pool_size
        self.timeout = timeout
        self.kwargs = kwargs

        self._pool = None
        self._connected = False

        logger.debug(f"{self.__class__.__name__} configured for {self.dsn_label}")

    @property
    def dsn_label(self) -> str:
        """``user@host:port/database``, without the password."""
        return f"{self.user}@{self.host}:{self.port}/{self.database}"

    @abstractmethod
    async def connect(self) -> None:
        """
        Open the pool. A second call on a connected provider is a no-op.

        Raises:
            ConnectionFailedError: If the server cannot be reached or rejects the login
        """

    @abstractmethod
    def acquire(self) -> AbstractAsyncContextManager[Any]:
        """
        Check out one connection for the lifetime of the ``async with`` block.

        Raises:
            ConnectionFailedError: If no connection can be obtained
        """

    @abstractmethod
    async def close(self) -> None:
        """Close the pool. Closing a closed provider is a no-op."""

    @property
    def is_connected(self) -> bool:
        return self._connected

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False

    def __repr__(self) -> str:
        state = "connected" if self._connected else "disconnected"
        return f"<{self.__class__.__name__} {self.dsn_label} ({state})>"
