"""
Read-only statement policy.

Only a single statement whose first keyword is SELECT or WITH may run.
Statements are split with sqlparse so chained statements are rejected and
leading comments cannot hide the real first keyword. This is a policy
check, not a full SQL parser: execution additionally happens inside a
read-only transaction.
"""

import logging

import sqlparse

from plumchat.connectors.base import InvalidInputError, RejectedOperationError

logger = logging.getLogger(__name__)

READ_KEYWORDS = frozenset({"SELECT", "WITH"})


def check_read_only(sql: str | None) -> str:
    """
    Validate that ``sql`` is a single read-only statement.

    Args:
        sql: Raw SQL text

    Returns:
        The trimmed statement, ready to execute

    Raises:
        InvalidInputError: If sql is None or blank
        RejectedOperationError: If it is not a single SELECT/WITH statement
    """
    if sql is None or not sql.strip():
        raise InvalidInputError("SQL query cannot be null or empty")

    statement = sql.strip()
    parsed = [
        stmt
        for stmt in sqlparse.parse(statement)
        if stmt.token_first(skip_ws=True, skip_cm=True) is not None
    ]

    if not parsed:
        raise InvalidInputError("SQL query contains no statement")

    if len(parsed) > 1:
        logger.warning(f"Rejected multi-statement input: {statement[:100]}")
        raise RejectedOperationError(
            "Multiple SQL statements detected - only a single read query is allowed"
        )

    first_token = parsed[0].token_first(skip_ws=True, skip_cm=True)
    keyword = first_token.value.split()[0].upper() if first_token.value.strip() else ""
    if keyword not in READ_KEYWORDS:
        logger.warning(f"Rejected non-read statement starting with {keyword!r}")
        raise RejectedOperationError(
            f"Only read queries allowed (SELECT or WITH), found: {keyword or first_token.value}"
        )

    return statement
