"""
Database Connectors Module

Provides the pooled connection provider handed to every PlumChat component.

Available Connectors:
    - BaseConnector: Abstract base class
    - PostgresConnector: PostgreSQL/Greenplum connector (asyncpg)

Usage:
    from plumchat.connectors import create_connector

    connector = create_connector(database_url="postgresql://gpadmin@localhost:5432/warehouse")

    async with connector:
        async with connector.acquire() as conn:
            await conn.fetch("SELECT 1")
"""

from plumchat.connectors.base import (
    BaseConnector,
    ConnectionFailedError,
    ConnectorError,
    InvalidInputError,
    QueryFailedError,
    RejectedOperationError,
    SchemaError,
    TableNotFoundError,
)
from plumchat.connectors.factory import create_connector, infer_database_type
from plumchat.connectors.postgres import PostgresConnector

__all__ = [
    "BaseConnector",
    "PostgresConnector",
    "create_connector",
    "infer_database_type",
    "ConnectorError",
    "InvalidInputError",
    "RejectedOperationError",
    "ConnectionFailedError",
    "QueryFailedError",
    "SchemaError",
    "TableNotFoundError",
]
