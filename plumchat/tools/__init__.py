"""Tool system entrypoint."""

from __future__ import annotations

from pathlib import Path

from plumchat.config import get_settings
from plumchat.tools.executor import ToolExecutionError, ToolExecutor
from plumchat.tools.policy import PolicyEngine, ToolPolicyError
from plumchat.tools.registry import ToolRegistry


def initialize_tools(policy_path: str | Path | None = None) -> None:
    # Register built-in tools
    from plumchat.tools.builtin import query, schema  # noqa: F401

    policy_path = policy_path or get_settings().tools.policy_path
    if policy_path:
        ToolRegistry.load_policy_config(policy_path)


__all__ = [
    "ToolExecutor",
    "ToolExecutionError",
    "PolicyEngine",
    "ToolPolicyError",
    "ToolRegistry",
    "initialize_tools",
]
