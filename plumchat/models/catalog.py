"""
Catalog models.

Snapshot of database metadata as seen at introspection time.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class TableKind(StrEnum):
    TABLE = "TABLE"
    VIEW = "VIEW"


class ColumnMeta(BaseModel):
    """Information about a table column."""

    name: str = Field(..., description="Column name")
    declared_type: str = Field(..., description="Declared type name")
    size: int | None = Field(None, description="Character length or numeric precision")
    decimal_digits: int | None = Field(None, description="Numeric scale")
    nullable: bool = Field(..., description="Whether column can be NULL")
    default_value: str | None = Field(None, description="Default expression if any")
    remarks: str | None = Field(None, description="Column comment")
    is_primary_key: bool = Field(default=False, description="Is part of primary key")
    is_foreign_key: bool = Field(default=False, description="Is part of a foreign key")

    model_config = ConfigDict(frozen=True)


class TableMeta(BaseModel):
    """Information about a table or view."""

    schema_name: str = Field(..., alias="schema", description="Schema name")
    name: str = Field(..., description="Table name")
    kind: TableKind = Field(default=TableKind.TABLE, description="TABLE or VIEW")
    remarks: str | None = Field(None, description="Table comment")
    columns: list[ColumnMeta] = Field(default_factory=list, description="Ordered columns")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def qualified_name(self) -> str:
        return f"{self.schema_name}.{self.name}"

    @property
    def primary_key(self) -> list[str]:
        return [column.name for column in self.columns if column.is_primary_key]


class SchemaMeta(BaseModel):
    """A user schema and the tables/views it contains."""

    name: str = Field(..., description="Schema name")
    owner: str | None = Field(None, description="Schema owner role")
    table_names: list[str] = Field(default_factory=list, description="Ordered table names")

    model_config = ConfigDict(frozen=True)
