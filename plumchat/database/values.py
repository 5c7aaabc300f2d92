"""
Cell value normalization.

Values coming back from asyncpg are loosely typed (Decimal, UUID, Range,
lists, ...). Each result column is mapped to a ``CellKind`` from its
reported SQL type name, and every cell is coerced into the matching member
of the closed ``CellValue`` union so serialization stays well-defined.
"""

from __future__ import annotations

import json
from datetime import date, datetime, time
from enum import StrEnum
from typing import Any

from plumchat.models.query import CellValue


class CellKind(StrEnum):
    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    TEXT = "text"
    DATETIME = "datetime"
    BINARY = "binary"


_TYPE_KINDS: dict[str, CellKind] = {
    "bool": CellKind.BOOLEAN,
    "boolean": CellKind.BOOLEAN,
    "int2": CellKind.INTEGER,
    "int4": CellKind.INTEGER,
    "int8": CellKind.INTEGER,
    "smallint": CellKind.INTEGER,
    "integer": CellKind.INTEGER,
    "bigint": CellKind.INTEGER,
    "oid": CellKind.INTEGER,
    "float4": CellKind.FLOAT,
    "float8": CellKind.FLOAT,
    "real": CellKind.FLOAT,
    "double precision": CellKind.FLOAT,
    "numeric": CellKind.FLOAT,
    "decimal": CellKind.FLOAT,
    "date": CellKind.DATETIME,
    "time": CellKind.DATETIME,
    "timetz": CellKind.DATETIME,
    "timestamp": CellKind.DATETIME,
    "timestamptz": CellKind.DATETIME,
    "bytea": CellKind.BINARY,
    "void": CellKind.NULL,
    "unknown": CellKind.TEXT,
}


def kind_for_type(type_name: str | None) -> CellKind:
    """Map a reported SQL type name to a cell kind. Unknown types are text."""
    if not type_name:
        return CellKind.TEXT
    return _TYPE_KINDS.get(type_name.lower(), CellKind.TEXT)


def normalize_cell(value: Any, kind: CellKind) -> CellValue:
    """Coerce a driver value into the closed cell-value union."""
    if value is None or kind is CellKind.NULL:
        return None
    if kind is CellKind.BOOLEAN:
        return bool(value)
    if kind is CellKind.INTEGER:
        return int(value)
    if kind is CellKind.FLOAT:
        return float(value)
    if kind is CellKind.DATETIME:
        if isinstance(value, (datetime, date, time)):
            return value
        return str(value)
    if kind is CellKind.BINARY:
        return bytes(value)
    return _as_text(value)


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value, default=str)
    return str(value)
