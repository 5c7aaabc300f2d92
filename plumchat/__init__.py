"""
PlumChat core.

Read-only query execution, catalog introspection and structured result
extraction for an LLM-backed Greenplum/PostgreSQL chat client.
"""

__version__ = "0.1.0"
