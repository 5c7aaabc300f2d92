"""System-catalog query templates for PostgreSQL/Greenplum introspection."""

from __future__ import annotations

from typing import NamedTuple


class CatalogTemplates(NamedTuple):
    """pg_catalog queries used by the catalog introspector."""

    list_schemas: str
    list_tables: str
    get_table: str
    primary_key_columns: str
    foreign_key_columns: str
    list_columns: str


_TABLE_SELECT = (
    "SELECT c.relname AS table_name, "
    "CASE c.relkind WHEN 'v' THEN 'VIEW' ELSE 'TABLE' END AS table_type, "
    "pg_catalog.obj_description(c.oid, 'pg_class') AS remarks "
    "FROM pg_catalog.pg_class c "
    "JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace "
    "WHERE n.nspname = $1 "
    "AND c.relkind IN ('r', 'v') "
)

_KEY_COLUMNS = (
    "SELECT a.attname AS column_name "
    "FROM pg_catalog.pg_constraint con "
    "JOIN pg_catalog.pg_class c ON c.oid = con.conrelid "
    "JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace "
    "JOIN pg_catalog.pg_attribute a "
    "ON a.attrelid = con.conrelid AND a.attnum = ANY(con.conkey) "
    "WHERE con.contype = '{contype}' "
    "AND n.nspname = $1 "
    "AND c.relname = $2"
)

POSTGRES_CATALOG = CatalogTemplates(
    list_schemas=(
        "SELECT n.nspname AS schema_name, "
        "pg_catalog.pg_get_userbyid(n.nspowner) AS owner "
        "FROM pg_catalog.pg_namespace n "
        "ORDER BY n.nspname"
    ),
    list_tables=_TABLE_SELECT + "ORDER BY table_type, c.relname",
    get_table=_TABLE_SELECT + "AND c.relname = $2",
    primary_key_columns=_KEY_COLUMNS.format(contype="p"),
    foreign_key_columns=_KEY_COLUMNS.format(contype="f"),
    list_columns=(
        "SELECT a.attname AS column_name, "
        "t.typname AS type_name, "
        "CASE "
        "WHEN t.typname IN ('varchar', 'bpchar') AND a.atttypmod > 0 THEN a.atttypmod - 4 "
        "WHEN t.typname = 'numeric' AND a.atttypmod > 0 THEN ((a.atttypmod - 4) >> 16) & 65535 "
        "ELSE NULL END AS column_size, "
        "CASE "
        "WHEN t.typname = 'numeric' AND a.atttypmod > 0 THEN (a.atttypmod - 4) & 65535 "
        "ELSE NULL END AS decimal_digits, "
        "NOT a.attnotnull AS nullable, "
        "pg_catalog.pg_get_expr(d.adbin, d.adrelid) AS column_default, "
        "pg_catalog.col_description(a.attrelid, a.attnum) AS remarks "
        "FROM pg_catalog.pg_attribute a "
        "JOIN pg_catalog.pg_class c ON c.oid = a.attrelid "
        "JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace "
        "JOIN pg_catalog.pg_type t ON t.oid = a.atttypid "
        "LEFT JOIN pg_catalog.pg_attrdef d "
        "ON d.adrelid = a.attrelid AND d.adnum = a.attnum "
        "WHERE n.nspname = $1 "
        "AND c.relname = $2 "
        "AND a.attnum > 0 "
        "AND NOT a.attisdropped "
        "ORDER BY a.attnum"
    ),
)
