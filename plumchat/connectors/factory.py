"""Connector factory for supported database URLs."""

from __future__ import annotations

from urllib.parse import urlparse

from plumchat.connectors.base import BaseConnector
from plumchat.connectors.postgres import PostgresConnector

_POSTGRES_SCHEMES = {"postgres", "postgresql", "greenplum"}


def infer_database_type(database_url: str) -> str:
    """Infer logical database type from connection URL scheme."""
    parsed = _parse_url(database_url)
    scheme = parsed.scheme.split("+")[0].lower()
    if scheme in _POSTGRES_SCHEMES:
        return "postgresql"
    raise ValueError(f"Unsupported database URL scheme: {parsed.scheme}")


def create_connector(
    *,
    database_url: str,
    pool_size: int = 10,
    timeout: int = 30,
    **kwargs,
) -> BaseConnector:
    """Create a connector instance from a database URL."""
    parsed = _parse_url(database_url)
    if not parsed.hostname:
        raise ValueError("Invalid database URL: host is required.")

    infer_database_type(database_url)
    db_name = parsed.path.lstrip("/")

    return PostgresConnector(
        host=parsed.hostname,
        port=parsed.port or 5432,
        database=db_name or "postgres",
        user=parsed.username or "gpadmin",
        password=parsed.password or "",
        pool_size=pool_size,
        timeout=timeout,
        **kwargs,
    )


def _parse_url(database_url: str):
    normalized = database_url.replace("postgresql+asyncpg://", "postgresql://")
    return urlparse(normalized)
