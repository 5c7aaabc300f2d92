"""
Query result models.

``QueryResult`` is what the executor returns; ``QueryResultPayload`` is the
embedded-JSON shape the query tool hands to the LLM and that the structured
result extractor later recovers from assistant text.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

CellValue = bool | int | float | str | datetime | date | time | bytes | None

QUERY_RESULT_TYPE = "query_result"


class ColumnDescriptor(BaseModel):
    """
    Result-set column metadata.

    For ad-hoc query results only name and type come from the driver:
    nullable stays True and precision/scale stay None. Declared
    nullability and sizes live in the catalog (``ColumnMeta``).
    """

    name: str = Field(..., description="Column label")
    type: str = Field(..., description="Reported SQL type name")
    nullable: bool = Field(default=True, description="Whether NULLs may appear")
    precision: int | None = Field(None, description="Numeric precision or length")
    scale: int | None = Field(None, description="Numeric scale")

    model_config = ConfigDict(frozen=True)


class QueryResult(BaseModel):
    """Result from query execution."""

    column_names: list[str] = Field(..., description="Column names in result order")
    column_meta: list[ColumnDescriptor] = Field(
        default_factory=list,
        description="Driver-reported column metadata (nullable/precision/scale are not catalog values)",
    )
    rows: list[dict[str, CellValue]] = Field(..., description="Rows keyed by column name")
    row_count: int = Field(..., ge=0, description="Number of rows returned")
    execution_time_ms: int = Field(..., ge=0, description="Wall-clock execution time in ms")

    model_config = ConfigDict(frozen=True)

    def row_values(self) -> list[list[CellValue]]:
        """Rows as value lists in column order."""
        return [[row.get(name) for name in self.column_names] for row in self.rows]

    def summary_message(self) -> str:
        lines = [
            "Query executed successfully!",
            "",
            f"Execution time: {self.execution_time_ms} ms",
            f"Rows returned: {self.row_count}",
            "",
        ]
        if self.row_count > 0:
            lines.append(f"Found {self.row_count} results.")
        else:
            lines.append("No rows returned.")
        return "\n".join(lines)

    def to_payload(self) -> QueryResultPayload:
        return QueryResultPayload(
            message=self.summary_message(),
            execution_time_ms=self.execution_time_ms,
            row_count=self.row_count,
            column_names=list(self.column_names),
            column_metadata=list(self.column_meta),
            rows=self.row_values(),
        )


class QueryResultPayload(BaseModel):
    """Embedded-JSON ``query_result`` object."""

    type: Literal["query_result"] = QUERY_RESULT_TYPE
    message: str = ""
    execution_time_ms: int = Field(0, alias="executionTimeMs")
    row_count: int = Field(0, alias="rowCount")
    column_names: list[str] = Field(..., alias="columnNames")
    column_metadata: list[ColumnDescriptor] = Field(default_factory=list, alias="columnMetadata")
    rows: list[list[CellValue]] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, ser_json_bytes="base64")

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
