"""Built-in catalog exploration tools."""

from __future__ import annotations

import logging
from typing import Any

from plumchat.database import CatalogIntrospector
from plumchat.tools.base import ToolCategory, ToolContext, tool
from plumchat.tools.builtin.connection import connected

logger = logging.getLogger(__name__)


@tool(
    name="get_all_schemas",
    description=(
        "Get all user database schemas with their table names. System schemas are excluded."
    ),
    category=ToolCategory.SCHEMA,
)
async def get_all_schemas(ctx: ToolContext | None = None) -> dict[str, Any]:
    async with connected(ctx) as connector:
        schemas = await CatalogIntrospector(connector).list_schemas()
    return {"schemas": [schema.model_dump(mode="json") for schema in schemas]}


@tool(
    name="get_tables_in_schema",
    description=(
        "Get detailed information about all tables in a schema, including columns, data "
        "types, primary keys and foreign keys."
    ),
    category=ToolCategory.SCHEMA,
)
async def get_tables_in_schema(schema: str, ctx: ToolContext | None = None) -> dict[str, Any]:
    async with connected(ctx) as connector:
        tables = await CatalogIntrospector(connector).list_tables(schema)
    return {
        "schema": schema.strip(),
        "tables": [table.model_dump(mode="json") for table in tables],
    }


@tool(
    name="get_table_info",
    description=(
        "Get detailed information about a specific table: column types, nullability, "
        "defaults, comments and key relationships."
    ),
    category=ToolCategory.SCHEMA,
)
async def get_table_info(schema: str, table: str, ctx: ToolContext | None = None) -> dict[str, Any]:
    async with connected(ctx) as connector:
        table_meta = await CatalogIntrospector(connector).get_table(schema, table)
    return table_meta.model_dump(mode="json")
