"""
QueryExecutor: guarded execution of ad-hoc read-only SQL.

Runs a single SELECT/WITH statement against the target database and
marshals the result into a ``QueryResult``:
- Validates input and enforces the read-only policy
- Clamps the row cap (server-side cursor fetch + client-side counted loop)
- Applies a per-call statement timeout
- Normalizes cell values by column SQL type
- Reports wall-clock execution time

No retries: a failed query is reported to the caller immediately.
"""

import asyncio
import logging
import time
from typing import Any

import asyncpg

from plumchat.config import get_settings
from plumchat.connectors.base import BaseConnector, QueryFailedError
from plumchat.database.safety import check_read_only
from plumchat.database.values import CellKind, kind_for_type, normalize_cell
from plumchat.models import ColumnDescriptor, QueryResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROWS = 1000
ABSOLUTE_MAX_ROWS = 10000
QUERY_PLAN_COLUMN = "QUERY PLAN"


class QueryExecutor:
    """
    Read-only query execution guard.

    Each call checks out its own connection from the connector and runs
    inside a read-only transaction, so concurrent calls never share state.

    Usage:
        executor = QueryExecutor(connector)
        result = await executor.execute("SELECT * FROM sales.orders", max_rows=50)
        plan = await executor.explain("SELECT * FROM sales.orders")
    """

    def __init__(
        self,
        connector: BaseConnector,
        default_max_rows: int = DEFAULT_MAX_ROWS,
        absolute_max_rows: int = ABSOLUTE_MAX_ROWS,
    ):
        self.connector = connector
        self.default_max_rows = default_max_rows
        self.absolute_max_rows = absolute_max_rows

    @classmethod
    def from_settings(cls, connector: BaseConnector) -> "QueryExecutor":
        database = get_settings().database
        return cls(
            connector,
            default_max_rows=database.default_max_rows,
            absolute_max_rows=database.absolute_max_rows,
        )

    def resolve_max_rows(self, requested: int | None) -> int:
        """Effective row cap: the default for None/<=0, else clamped to the absolute max."""
        if requested is None or requested <= 0:
            return self.default_max_rows
        return min(requested, self.absolute_max_rows)

    async def execute(
        self,
        sql: str | None,
        max_rows: int | None = None,
        timeout: float | None = None,
    ) -> QueryResult:
        """
        Execute a read-only query.

        Args:
            sql: SELECT or WITH statement
            max_rows: Requested row cap (None/<=0 = default, clamped to absolute max)
            timeout: Statement timeout in seconds (overrides connector default)

        Returns:
            QueryResult with at most the effective cap of rows

        Raises:
            InvalidInputError: If sql is empty
            RejectedOperationError: If sql is not a single read query
            ConnectionFailedError: If no connection can be acquired
            QueryFailedError: If the database rejects or fails the query
        """
        statement = check_read_only(sql)
        cap = self.resolve_max_rows(max_rows)
        query_timeout = timeout or self.connector.timeout

        logger.info(f"Executing query with max rows {cap}: {statement[:100]}")
        start_time = time.perf_counter()

        try:
            async with self.connector.acquire() as conn:
                async with conn.transaction(readonly=True):
                    await self._set_statement_timeout(conn, query_timeout)

                    prepared = await conn.prepare(statement, timeout=query_timeout)
                    columns = [_describe_attribute(attr) for attr in prepared.get_attributes()]
                    kinds = [kind_for_type(column.type) for column in columns]

                    cursor = await prepared.cursor()
                    records = await cursor.fetch(cap, timeout=query_timeout)

                    rows: list[dict[str, Any]] = []
                    for record in records:
                        if len(rows) >= cap:
                            break
                        rows.append(_build_row(record, columns, kinds))

        except (asyncpg.QueryCanceledError, asyncio.TimeoutError) as e:
            logger.error(f"Query timed out after {query_timeout}s: {statement[:100]}...")
            raise QueryFailedError(f"Query timeout ({query_timeout}s)") from e
        except (asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            elapsed_ms = _elapsed_ms(start_time)
            logger.error(f"Query execution failed after {elapsed_ms} ms: {e}")
            raise QueryFailedError(f"Query execution failed: {e}") from e

        execution_time_ms = _elapsed_ms(start_time)
        logger.info(f"Query executed successfully. Returned {len(rows)} rows in {execution_time_ms} ms")

        return QueryResult(
            column_names=[column.name for column in columns],
            column_meta=columns,
            rows=rows,
            row_count=len(rows),
            execution_time_ms=execution_time_ms,
        )

    async def explain(self, sql: str | None, timeout: float | None = None) -> QueryResult:
        """
        Return the execution plan for a read-only query.

        The plan is a single ``QUERY PLAN`` column with one row per plan
        line. No row cap is applied.
        """
        statement = check_read_only(sql)
        query_timeout = timeout or self.connector.timeout
        explain_sql = f"EXPLAIN {statement}"
        start_time = time.perf_counter()

        try:
            async with self.connector.acquire() as conn:
                async with conn.transaction(readonly=True):
                    await self._set_statement_timeout(conn, query_timeout)
                    records = await conn.fetch(explain_sql, timeout=query_timeout)

        except (asyncpg.QueryCanceledError, asyncio.TimeoutError) as e:
            logger.error(f"Explain timed out after {query_timeout}s: {statement[:100]}...")
            raise QueryFailedError(f"Query timeout ({query_timeout}s)") from e
        except (asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            elapsed_ms = _elapsed_ms(start_time)
            logger.error(f"Query explain failed after {elapsed_ms} ms: {e}")
            raise QueryFailedError(f"Query explain failed: {e}") from e

        rows = [{QUERY_PLAN_COLUMN: record[0]} for record in records]
        execution_time_ms = _elapsed_ms(start_time)
        logger.info(f"Query plan generated in {execution_time_ms} ms")

        return QueryResult(
            column_names=[QUERY_PLAN_COLUMN],
            column_meta=[ColumnDescriptor(name=QUERY_PLAN_COLUMN, type="text", nullable=False)],
            rows=rows,
            row_count=len(rows),
            execution_time_ms=execution_time_ms,
        )

    async def _set_statement_timeout(self, conn, timeout: float) -> None:
        await conn.execute(f"SET LOCAL statement_timeout = {int(timeout * 1000)}")


def _describe_attribute(attribute) -> ColumnDescriptor:
    # asyncpg row descriptions carry no nullability or typmod
    return ColumnDescriptor(name=attribute.name, type=attribute.type.name, nullable=True)


def _build_row(record, columns: list[ColumnDescriptor], kinds: list[CellKind]) -> dict[str, Any]:
    return {
        column.name: normalize_cell(record[index], kinds[index])
        for index, column in enumerate(columns)
    }


def _elapsed_ms(start_time: float) -> int:
    return int((time.perf_counter() - start_time) * 1000)
