"""Structured table recovery from free-form assistant text."""

from plumchat.extraction.extractor import (
    extract,
    extract_json_table,
    extract_markdown_table,
    find_json_candidates,
    split_table_row,
)

__all__ = [
    "extract",
    "extract_json_table",
    "extract_markdown_table",
    "find_json_candidates",
    "split_table_row",
]
