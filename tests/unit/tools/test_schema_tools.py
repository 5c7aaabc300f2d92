import pytest

from plumchat.tools import initialize_tools
from plumchat.tools.base import ToolContext
from plumchat.tools.builtin import connection
from plumchat.tools.executor import ToolExecutionError, ToolExecutor

ORDERS_ROW = {"table_name": "orders", "table_type": "TABLE", "remarks": None}


async def _catalog_fetch(query, *args):
    if "pg_get_userbyid" in query:
        return [
            {"schema_name": "pg_catalog", "owner": "gpadmin"},
            {"schema_name": "sales", "owner": "analyst"},
        ]
    if "obj_description" in query:
        return [ORDERS_ROW]
    if "contype = 'p'" in query:
        return [{"column_name": "id"}]
    if "contype = 'f'" in query:
        return []
    return [
        {
            "column_name": "id",
            "type_name": "int4",
            "column_size": None,
            "decimal_digits": None,
            "nullable": False,
            "column_default": None,
            "remarks": None,
        }
    ]


@pytest.fixture
def catalog_conn(monkeypatch, fake_connector, mock_conn):
    initialize_tools()
    monkeypatch.setattr(connection, "build_connector", lambda ctx: fake_connector)
    mock_conn.fetch.side_effect = _catalog_fetch
    return mock_conn


@pytest.fixture
def ctx():
    return ToolContext(user_id="analyst", correlation_id="corr-7")


@pytest.mark.asyncio
async def test_get_all_schemas(catalog_conn, ctx):
    response = await ToolExecutor().execute("get_all_schemas", {}, ctx)

    assert response["result"] == {
        "schemas": [{"name": "sales", "owner": "analyst", "table_names": ["orders"]}]
    }


@pytest.mark.asyncio
async def test_get_tables_in_schema(catalog_conn, ctx):
    response = await ToolExecutor().execute("get_tables_in_schema", {"schema": " sales "}, ctx)

    result = response["result"]
    assert result["schema"] == "sales"
    assert [table["name"] for table in result["tables"]] == ["orders"]
    assert result["tables"][0]["columns"][0]["is_primary_key"] is True


@pytest.mark.asyncio
async def test_get_table_info(catalog_conn, ctx):
    catalog_conn.fetchrow.return_value = ORDERS_ROW

    response = await ToolExecutor().execute(
        "get_table_info", {"schema": "sales", "table": "orders"}, ctx
    )

    table = response["result"]
    assert table["name"] == "orders"
    assert table["schema_name"] == "sales"
    assert table["kind"] == "TABLE"
    assert table["columns"][0]["name"] == "id"


@pytest.mark.asyncio
async def test_get_table_info_missing_table(catalog_conn, fake_connector, ctx):
    catalog_conn.fetchrow.return_value = None

    with pytest.raises(ToolExecutionError, match="Table sales.missing not found"):
        await ToolExecutor().execute("get_table_info", {"schema": "sales", "table": "missing"}, ctx)

    assert fake_connector.closed is True
