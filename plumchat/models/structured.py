"""
Structured table models rendered by the chat UI.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class StructuredColumn(BaseModel):
    """Column header for a UI table."""

    name: str
    type: str = "TEXT"
    nullable: bool = True

    model_config = ConfigDict(frozen=True)


class StructuredTable(BaseModel):
    """Canonical {columns, rows} table recovered from assistant output."""

    name: str = Field(default="query_result", description="Table label")
    source: Literal["json", "markdown"] = Field(..., description="Where the table was recovered from")
    columns: list[StructuredColumn] = Field(..., description="Ordered columns")
    rows: list[list[Any]] = Field(default_factory=list, description="Rows of cells in column order")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_row_width(self) -> StructuredTable:
        width = len(self.columns)
        for index, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(f"Row {index} has {len(row)} cells, expected {width}")
        return self

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]
