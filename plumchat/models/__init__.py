"""
PlumChat Models Module

Pydantic models shared by the executor, catalog introspector, extractor and
tools. All models are immutable once constructed.

Available Models:
    Catalog Models:
        - SchemaMeta: Schema with its table names
        - TableMeta: Table or view with its columns
        - ColumnMeta: Column with key flags
        - TableKind: TABLE or VIEW

    Query Models:
        - QueryResult: Rows, column metadata and timing
        - ColumnDescriptor: Result-set column metadata
        - QueryResultPayload: Embedded-JSON ``query_result`` shape
        - CellValue: Closed union of normalized cell values

    Structured Models:
        - StructuredTable: UI-ready table
        - StructuredColumn: UI table column

Usage:
    from plumchat.models import QueryResult, StructuredTable
"""

from plumchat.models.catalog import ColumnMeta, SchemaMeta, TableKind, TableMeta
from plumchat.models.query import (
    QUERY_RESULT_TYPE,
    CellValue,
    ColumnDescriptor,
    QueryResult,
    QueryResultPayload,
)
from plumchat.models.structured import StructuredColumn, StructuredTable

__all__ = [
    "ColumnMeta",
    "SchemaMeta",
    "TableKind",
    "TableMeta",
    "CellValue",
    "ColumnDescriptor",
    "QUERY_RESULT_TYPE",
    "QueryResult",
    "QueryResultPayload",
    "StructuredColumn",
    "StructuredTable",
]
