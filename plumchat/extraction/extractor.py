"""
Structured result extraction from assistant text.

The LLM's output format is not guaranteed, so tabular data is recovered in
two independent passes, first success wins:

1. Embedded JSON: a ``{"type": "query_result", ...}`` object produced by the
   query tool and echoed into the assistant message.
2. Markdown: the first pipe-table in the text.

Both passes are pure functions; ``extract`` composes them and never raises.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from plumchat.models import QUERY_RESULT_TYPE, StructuredColumn, StructuredTable

logger = logging.getLogger(__name__)

_TYPE_MARKER = '"type"'
_SEPARATOR_MARKER = "---"
_MIN_TABLE_LINES = 3


def extract(text: str | None) -> StructuredTable | None:
    """Recover a structured table from assistant text, or None."""
    if not text:
        return None

    try:
        table = extract_json_table(text)
        if table is not None:
            logger.info(
                f"Parsed query_result JSON: {len(table.columns)} columns, {len(table.rows)} rows"
            )
            return table

        table = extract_markdown_table(text)
        if table is not None:
            logger.info(
                f"Parsed markdown table: {len(table.columns)} columns, {len(table.rows)} rows"
            )
            return table
    except Exception as e:
        logger.warning(f"Error parsing structured data from response: {e}")
        return None

    logger.debug("No structured data found in response")
    return None


# ============================================================================
# Embedded JSON
# ============================================================================


def find_json_candidates(text: str) -> list[str]:
    """
    Top-level ``{...}`` spans that mention a ``"type"`` key, in order.

    Braces are counted without regard to string literals; unbalanced
    closing braces at depth zero are ignored.
    """
    candidates: list[str] = []
    depth = 0
    start = -1

    for index, char in enumerate(text):
        if char == "{":
            if depth == 0:
                start = index
            depth += 1
        elif char == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                candidate = text[start : index + 1]
                if _TYPE_MARKER in candidate:
                    candidates.append(candidate)
                start = -1

    return candidates


def extract_json_table(text: str) -> StructuredTable | None:
    """Table from the first embedded ``query_result`` object, or None."""
    candidates = find_json_candidates(text)
    logger.debug(f"Found {len(candidates)} JSON candidates")

    for index, candidate in enumerate(candidates):
        try:
            payload = json.loads(candidate)
        except json.JSONDecodeError as e:
            logger.debug(f"Failed to parse JSON candidate {index}: {e}")
            continue

        if not isinstance(payload, dict) or payload.get("type") != QUERY_RESULT_TYPE:
            continue

        table = _table_from_payload(payload)
        if table is not None:
            return table
        logger.debug(f"Skipping malformed query_result candidate {index}")

    return None


def _table_from_payload(payload: dict[str, Any]) -> StructuredTable | None:
    column_names = payload.get("columnNames")
    if not isinstance(column_names, list) or not all(isinstance(n, str) for n in column_names):
        return None

    columns = _columns_from_metadata(payload.get("columnMetadata"), column_names)

    raw_rows = payload.get("rows") or []
    if not isinstance(raw_rows, list):
        return None
    rows = [row for row in raw_rows if isinstance(row, list) and len(row) == len(columns)]
    if len(rows) != len(raw_rows):
        logger.debug(f"Dropped {len(raw_rows) - len(rows)} rows with mismatched width")

    try:
        return StructuredTable(source="json", columns=columns, rows=rows)
    except ValidationError as e:
        logger.debug(f"Invalid query_result table: {e}")
        return None


def _columns_from_metadata(metadata: Any, column_names: list[str]) -> list[StructuredColumn]:
    usable = (
        isinstance(metadata, list)
        and len(metadata) == len(column_names)
        and all(isinstance(meta, dict) for meta in metadata)
    )
    if not usable:
        return [StructuredColumn(name=name) for name in column_names]

    columns = []
    for name, meta in zip(column_names, metadata):
        meta_name = meta.get("name")
        column_type = meta.get("type")
        nullable = meta.get("nullable")
        columns.append(
            StructuredColumn(
                name=meta_name if isinstance(meta_name, str) else name,
                type=column_type if isinstance(column_type, str) else "TEXT",
                nullable=nullable if isinstance(nullable, bool) else True,
            )
        )
    return columns


# ============================================================================
# Markdown tables
# ============================================================================


def extract_markdown_table(text: str) -> StructuredTable | None:
    """Table from the first markdown pipe-table in ``text``, or None."""
    block = _first_table_block(text)
    if len(block) < _MIN_TABLE_LINES:
        logger.debug(f"Not enough table lines found: {len(block)}")
        return None
    if _SEPARATOR_MARKER not in block[1]:
        logger.debug("Table block has no header separator line")
        return None

    column_names = split_table_row(block[0])
    if not column_names or not any(column_names):
        logger.debug("No column names found in header")
        return None

    rows = []
    for line in block[2:]:
        cells = split_table_row(line)
        if len(cells) == len(column_names):
            rows.append(cells)

    return StructuredTable(
        source="markdown",
        columns=[StructuredColumn(name=name) for name in column_names],
        rows=rows,
    )


def _first_table_block(text: str) -> list[str]:
    block: list[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if stripped.startswith("|") and stripped.endswith("|"):
            block.append(stripped)
        elif block and _SEPARATOR_MARKER in stripped:
            block.append(stripped)
        elif block and stripped:
            break
    return block


def split_table_row(line: str) -> list[str]:
    """Cells of a ``| a | b |`` row, trimmed, without the wrapping pipes."""
    stripped = line.strip()
    if stripped.startswith("|"):
        stripped = stripped[1:]
    if stripped.endswith("|"):
        stripped = stripped[:-1]
    return [cell.strip() for cell in stripped.split("|")]
