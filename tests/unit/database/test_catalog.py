"""Unit tests for catalog introspection."""

import asyncio

import asyncpg
import pytest

from plumchat.connectors.base import InvalidInputError, SchemaError, TableNotFoundError
from plumchat.database.catalog import CatalogIntrospector, is_user_schema
from plumchat.models import TableKind

SCHEMA_ROWS = [
    {"schema_name": "information_schema", "owner": "gpadmin"},
    {"schema_name": "pg_catalog", "owner": "gpadmin"},
    {"schema_name": "pg_temp_3", "owner": "gpadmin"},
    {"schema_name": "pg_toast_temp_3", "owner": "gpadmin"},
    {"schema_name": "gp_toolkit", "owner": "gpadmin"},
    {"schema_name": "public", "owner": "gpadmin"},
    {"schema_name": "sales", "owner": "analyst"},
]

TABLE_ROWS = {
    "public": [],
    "sales": [
        {"table_name": "orders", "table_type": "TABLE", "remarks": "Customer orders"},
        {"table_name": "order_summary", "table_type": "VIEW", "remarks": None},
    ],
}

COLUMN_ROWS = [
    {
        "column_name": "id",
        "type_name": "int4",
        "column_size": 32,
        "decimal_digits": 0,
        "nullable": False,
        "column_default": "nextval('sales.orders_id_seq'::regclass)",
        "remarks": None,
    },
    {
        "column_name": "customer_id",
        "type_name": "int4",
        "column_size": 32,
        "decimal_digits": 0,
        "nullable": False,
        "column_default": None,
        "remarks": "Buyer",
    },
    {
        "column_name": "total",
        "type_name": "numeric",
        "column_size": 12,
        "decimal_digits": 2,
        "nullable": True,
        "column_default": None,
        "remarks": None,
    },
]


def _dispatch_fetch(primary_keys=("id",), foreign_keys=("customer_id",)):
    """Route catalog queries to canned rows by the shape of the SQL text."""

    async def _fetch(query, *args):
        if "pg_get_userbyid" in query:
            return SCHEMA_ROWS
        if "obj_description" in query:
            return TABLE_ROWS.get(args[0], [])
        if "contype = 'p'" in query:
            return [{"column_name": name} for name in primary_keys]
        if "contype = 'f'" in query:
            return [{"column_name": name} for name in foreign_keys]
        if "attisdropped" in query:
            return COLUMN_ROWS
        raise AssertionError(f"Unexpected catalog query: {query}")

    return _fetch


def test_is_user_schema():
    assert is_user_schema("public")
    assert is_user_schema("sales")
    assert not is_user_schema("pg_catalog")
    assert not is_user_schema("PG_CATALOG")
    assert not is_user_schema("information_schema")
    assert not is_user_schema("pg_toast")
    assert not is_user_schema("pg_temp_12")
    assert not is_user_schema("pg_toast_temp_12")
    assert not is_user_schema("")
    assert not is_user_schema(None)


@pytest.mark.asyncio
async def test_list_schemas_excludes_system_schemas(fake_connector, mock_conn):
    mock_conn.fetch.side_effect = _dispatch_fetch()

    schemas = await CatalogIntrospector(fake_connector).list_schemas()

    assert [schema.name for schema in schemas] == ["public", "sales"]
    sales = schemas[1]
    assert sales.owner == "analyst"
    assert sales.table_names == ["orders", "order_summary"]
    assert schemas[0].table_names == []
    assert fake_connector.acquired == fake_connector.released == 1


@pytest.mark.asyncio
async def test_list_tables_resolves_columns(fake_connector, mock_conn):
    mock_conn.fetch.side_effect = _dispatch_fetch()

    tables = await CatalogIntrospector(fake_connector).list_tables("sales")

    assert [table.name for table in tables] == ["orders", "order_summary"]
    assert tables[0].kind is TableKind.TABLE
    assert tables[1].kind is TableKind.VIEW
    assert tables[0].remarks == "Customer orders"
    assert tables[0].qualified_name == "sales.orders"
    assert [column.name for column in tables[0].columns] == ["id", "customer_id", "total"]


@pytest.mark.asyncio
async def test_get_table_flags_keys(fake_connector, mock_conn):
    mock_conn.fetch.side_effect = _dispatch_fetch()
    mock_conn.fetchrow.return_value = TABLE_ROWS["sales"][0]

    table = await CatalogIntrospector(fake_connector).get_table("sales", "orders")

    mock_conn.fetchrow.assert_awaited_once()
    assert mock_conn.fetchrow.await_args.args[1:] == ("sales", "orders")

    columns = {column.name: column for column in table.columns}
    assert columns["id"].is_primary_key is True
    assert columns["id"].is_foreign_key is False
    assert columns["customer_id"].is_foreign_key is True
    assert columns["customer_id"].is_primary_key is False
    assert columns["total"].is_primary_key is False
    assert columns["total"].is_foreign_key is False

    assert columns["id"].nullable is False
    assert columns["id"].default_value.startswith("nextval")
    assert columns["total"].size == 12
    assert columns["total"].decimal_digits == 2
    assert columns["customer_id"].remarks == "Buyer"
    assert table.primary_key == ["id"]


@pytest.mark.asyncio
async def test_get_table_missing(fake_connector, mock_conn):
    mock_conn.fetchrow.return_value = None

    with pytest.raises(TableNotFoundError) as exc_info:
        await CatalogIntrospector(fake_connector).get_table("s", "missing_table")

    assert exc_info.value.schema == "s"
    assert exc_info.value.table == "missing_table"
    assert "s.missing_table" in str(exc_info.value)
    assert fake_connector.released == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(("schema", "table"), [(None, "orders"), ("", "orders"), ("sales", "  ")])
async def test_get_table_requires_names(fake_connector, schema, table):
    with pytest.raises(InvalidInputError):
        await CatalogIntrospector(fake_connector).get_table(schema, table)

    assert fake_connector.acquired == 0


@pytest.mark.asyncio
async def test_list_tables_requires_schema(fake_connector):
    with pytest.raises(InvalidInputError, match="Schema name"):
        await CatalogIntrospector(fake_connector).list_tables("")


@pytest.mark.asyncio
async def test_catalog_errors_become_schema_errors(fake_connector, mock_conn):
    mock_conn.fetch.side_effect = asyncpg.InsufficientPrivilegeError(
        "permission denied for schema sales"
    )

    with pytest.raises(SchemaError, match="permission denied"):
        await CatalogIntrospector(fake_connector).list_tables("sales")

    with pytest.raises(SchemaError):
        await CatalogIntrospector(fake_connector).list_schemas()


@pytest.mark.asyncio
async def test_closed_connection_becomes_schema_error(fake_connector, mock_conn):
    mock_conn.fetch.side_effect = asyncpg.InterfaceError("connection was closed")

    with pytest.raises(SchemaError, match="connection was closed"):
        await CatalogIntrospector(fake_connector).list_schemas()

    assert fake_connector.acquired == fake_connector.released == 1


@pytest.mark.asyncio
async def test_metadata_timeout_becomes_schema_error(fake_connector, mock_conn):
    mock_conn.fetchrow.side_effect = asyncio.TimeoutError()

    with pytest.raises(SchemaError, match="sales.orders") as exc_info:
        await CatalogIntrospector(fake_connector).get_table("sales", "orders")

    assert isinstance(exc_info.value.__cause__, asyncio.TimeoutError)
