"""Query execution guard and catalog introspection."""

from plumchat.database.catalog import CatalogIntrospector, is_user_schema
from plumchat.database.executor import ABSOLUTE_MAX_ROWS, DEFAULT_MAX_ROWS, QueryExecutor
from plumchat.database.safety import check_read_only

__all__ = [
    "ABSOLUTE_MAX_ROWS",
    "DEFAULT_MAX_ROWS",
    "CatalogIntrospector",
    "QueryExecutor",
    "check_read_only",
    "is_user_schema",
]
