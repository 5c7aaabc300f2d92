"""
CatalogIntrospector: walks database metadata into catalog models.

Answers "what exists" questions (schemas, tables, columns, keys). Every call
reads the live catalog; nothing is cached. Column resolution costs three
metadata round-trips per table (primary keys, imported foreign keys,
columns), which is fine for exploratory use but not for bulk scans.
"""

from __future__ import annotations

import asyncio
import logging

import asyncpg

from plumchat.connectors.base import (
    BaseConnector,
    InvalidInputError,
    SchemaError,
    TableNotFoundError,
)
from plumchat.database.catalog_templates import POSTGRES_CATALOG, CatalogTemplates
from plumchat.models import ColumnMeta, SchemaMeta, TableKind, TableMeta

logger = logging.getLogger(__name__)

SYSTEM_SCHEMAS = frozenset(
    {
        "information_schema",
        "pg_catalog",
        "pg_toast",
        "pg_aoseg",
        "pg_bitmapindex",
        "gp_toolkit",
    }
)
SYSTEM_SCHEMA_PREFIXES = ("pg_temp", "pg_toast_temp")


def is_user_schema(schema_name: str | None) -> bool:
    """False for system catalog schemas and their temp variants."""
    if not schema_name:
        return False
    lowered = schema_name.lower()
    if lowered in SYSTEM_SCHEMAS:
        return False
    return not lowered.startswith(SYSTEM_SCHEMA_PREFIXES)


def _require(value: str | None, label: str) -> str:
    if value is None or not value.strip():
        raise InvalidInputError(f"{label} cannot be null or empty")
    return value.strip()


class CatalogIntrospector:
    """
    Catalog metadata reader.

    Usage:
        introspector = CatalogIntrospector(connector)
        schemas = await introspector.list_schemas()
        tables = await introspector.list_tables("public")
        orders = await introspector.get_table("public", "orders")
    """

    def __init__(self, connector: BaseConnector, templates: CatalogTemplates = POSTGRES_CATALOG):
        self.connector = connector
        self.templates = templates

    async def list_schemas(self) -> list[SchemaMeta]:
        """List user schemas with their table and view names."""
        try:
            async with self.connector.acquire() as conn:
                schema_rows = await conn.fetch(self.templates.list_schemas)

                schemas = []
                for row in schema_rows:
                    schema_name = row["schema_name"]
                    if not is_user_schema(schema_name):
                        continue
                    table_rows = await conn.fetch(self.templates.list_tables, schema_name)
                    schemas.append(
                        SchemaMeta(
                            name=schema_name,
                            owner=row["owner"],
                            table_names=[table_row["table_name"] for table_row in table_rows],
                        )
                    )

        except (asyncpg.PostgresError, asyncpg.InterfaceError, asyncio.TimeoutError) as e:
            logger.error(f"Schema listing failed: {e}")
            raise SchemaError(f"Failed to list schemas: {e}") from e

        logger.info(f"Found {len(schemas)} user schemas")
        return schemas

    async def list_tables(self, schema: str | None) -> list[TableMeta]:
        """List tables and views of a schema with fully resolved columns."""
        schema_name = _require(schema, "Schema name")

        try:
            async with self.connector.acquire() as conn:
                table_rows = await conn.fetch(self.templates.list_tables, schema_name)
                tables = [
                    await self._build_table(conn, schema_name, table_row)
                    for table_row in table_rows
                ]

        except (asyncpg.PostgresError, asyncpg.InterfaceError, asyncio.TimeoutError) as e:
            logger.error(f"Table listing failed for schema '{schema_name}': {e}")
            raise SchemaError(f"Failed to list tables for schema '{schema_name}': {e}") from e

        logger.info(f"Found {len(tables)} tables in schema '{schema_name}'")
        return tables

    async def get_table(self, schema: str | None, table: str | None) -> TableMeta:
        """
        Describe exactly one table or view.

        Raises:
            InvalidInputError: If schema or table is empty
            TableNotFoundError: If the catalog has no such table or view
            SchemaError: If a metadata query fails
        """
        schema_name = _require(schema, "Schema name")
        table_name = _require(table, "Table name")

        try:
            async with self.connector.acquire() as conn:
                table_row = await conn.fetchrow(self.templates.get_table, schema_name, table_name)
                if table_row is None:
                    raise TableNotFoundError(schema_name, table_name)
                table_meta = await self._build_table(conn, schema_name, table_row)

        except (asyncpg.PostgresError, asyncpg.InterfaceError, asyncio.TimeoutError) as e:
            logger.error(f"Table lookup failed for {schema_name}.{table_name}: {e}")
            raise SchemaError(
                f"Failed to retrieve table information for '{schema_name}.{table_name}': {e}"
            ) from e

        logger.info(f"Retrieved table info for '{table_meta.qualified_name}'")
        return table_meta

    async def _build_table(self, conn, schema_name: str, table_row) -> TableMeta:
        table_name = table_row["table_name"]
        return TableMeta(
            schema=schema_name,
            name=table_name,
            kind=TableKind(table_row["table_type"]),
            remarks=table_row["remarks"],
            columns=await self._resolve_columns(conn, schema_name, table_name),
        )

    async def _resolve_columns(self, conn, schema_name: str, table_name: str) -> list[ColumnMeta]:
        pk_rows = await conn.fetch(self.templates.primary_key_columns, schema_name, table_name)
        primary_keys = {row["column_name"] for row in pk_rows}

        fk_rows = await conn.fetch(self.templates.foreign_key_columns, schema_name, table_name)
        foreign_keys = {row["column_name"] for row in fk_rows}

        column_rows = await conn.fetch(self.templates.list_columns, schema_name, table_name)
        return [
            ColumnMeta(
                name=row["column_name"],
                declared_type=row["type_name"],
                size=row["column_size"],
                decimal_digits=row["decimal_digits"],
                nullable=row["nullable"],
                default_value=row["column_default"],
                remarks=row["remarks"],
                is_primary_key=row["column_name"] in primary_keys,
                is_foreign_key=row["column_name"] in foreign_keys,
            )
            for row in column_rows
        ]
