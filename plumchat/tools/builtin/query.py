"""Built-in query tools."""

from __future__ import annotations

import logging
from typing import Any

from plumchat.database import QueryExecutor
from plumchat.tools.base import ToolCategory, ToolContext, tool
from plumchat.tools.builtin.connection import connected, safe_identifier

logger = logging.getLogger(__name__)


@tool(
    name="execute_query",
    description=(
        "Execute a SQL SELECT query against the database. Only SELECT and WITH queries are "
        "allowed. Returns column headers, data rows and execution statistics."
    ),
    category=ToolCategory.QUERY,
)
async def execute_query(
    sql: str, max_rows: int | None = None, ctx: ToolContext | None = None
) -> dict[str, Any]:
    async with connected(ctx) as connector:
        result = await QueryExecutor.from_settings(connector).execute(sql, max_rows=max_rows)
    logger.info(
        f"execute_query returned {result.row_count} rows in {result.execution_time_ms} ms"
    )
    return result.to_payload().to_dict()


@tool(
    name="explain_query",
    description=(
        "Get the execution plan for a SQL SELECT query using EXPLAIN. Shows how the database "
        "will execute the query."
    ),
    category=ToolCategory.QUERY,
)
async def explain_query(sql: str, ctx: ToolContext | None = None) -> dict[str, Any]:
    async with connected(ctx) as connector:
        result = await QueryExecutor.from_settings(connector).explain(sql)
    return {
        "message": "Query plan generated successfully!",
        "executionTimeMs": result.execution_time_ms,
        "plan": [row["QUERY PLAN"] for row in result.rows],
    }


@tool(
    name="count_table_rows",
    description="Count the number of rows in a specific table (SELECT COUNT(*) FROM schema.table).",
    category=ToolCategory.QUERY,
)
async def count_table_rows(
    schema: str, table: str, ctx: ToolContext | None = None
) -> dict[str, Any]:
    schema_name = safe_identifier(schema, "Schema name")
    table_name = safe_identifier(table, "Table name")
    sql = f'SELECT COUNT(*) AS row_count FROM "{schema_name}"."{table_name}"'

    async with connected(ctx) as connector:
        result = await QueryExecutor.from_settings(connector).execute(sql, max_rows=1)

    row_count = result.rows[0]["row_count"] if result.rows else 0
    return {
        "schema": schema_name,
        "table": table_name,
        "rowCount": row_count or 0,
        "executionTimeMs": result.execution_time_ms,
    }


@tool(
    name="test_connection",
    description="Test database connectivity. Returns server status and probe query timing.",
    category=ToolCategory.SYSTEM,
)
async def test_connection(ctx: ToolContext | None = None) -> dict[str, Any]:
    async with connected(ctx) as connector:
        result = await QueryExecutor.from_settings(connector).execute(
            "SELECT 1 AS test_connection", max_rows=1
        )
    return {
        "status": "ok",
        "message": (
            "Database connection is working. Test query executed in "
            f"{result.execution_time_ms} ms."
        ),
        "executionTimeMs": result.execution_time_ms,
    }
