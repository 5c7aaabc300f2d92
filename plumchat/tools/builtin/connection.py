"""Connector checkout shared by the built-in tools."""

from __future__ import annotations

import logging
import re
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from plumchat.config import get_settings
from plumchat.connectors import BaseConnector, ConnectionFailedError, create_connector
from plumchat.connectors.base import InvalidInputError
from plumchat.tools.base import ToolContext

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def build_connector(ctx: ToolContext | None) -> BaseConnector:
    """Connector for the context's ``database_url``, falling back to DATABASE_URL."""
    settings = get_settings().database
    database_url = ctx.metadata.get("database_url") if ctx else None
    if not database_url:
        if settings.url is None:
            raise ConnectionFailedError("No database configured. Set DATABASE_URL.")
        database_url = str(settings.url)

    return create_connector(
        database_url=database_url,
        pool_size=settings.pool_size,
        timeout=settings.timeout,
    )


@asynccontextmanager
async def connected(ctx: ToolContext | None) -> AsyncIterator[BaseConnector]:
    """Open a connector for one tool call and close it on every exit path."""
    connector = build_connector(ctx)
    await connector.connect()
    try:
        yield connector
    finally:
        await connector.close()


def safe_identifier(name: str | None, label: str) -> str:
    if name is None or not name.strip():
        raise InvalidInputError(f"{label} cannot be null or empty")
    value = name.strip().strip('"')
    if not _IDENTIFIER_RE.fullmatch(value):
        raise InvalidInputError(f"Invalid identifier: {name}")
    return value
