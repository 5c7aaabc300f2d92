"""Policy enforcement for tool execution."""

from __future__ import annotations

from plumchat.config import get_settings
from plumchat.tools.base import ToolContext, ToolDefinition


class ToolPolicyError(Exception):
    pass


class PolicyEngine:
    """Checks the global tools switch and a tool's own policy against the caller."""

    def __init__(self, tools_enabled: bool | None = None) -> None:
        if tools_enabled is None:
            tools_enabled = get_settings().tools.enabled
        self.tools_enabled = tools_enabled

    def enforce(self, definition: ToolDefinition, ctx: ToolContext) -> None:
        if not self.tools_enabled:
            raise ToolPolicyError("Tool execution is disabled (TOOLS_ENABLED=false).")

        policy = definition.policy
        if not policy.enabled:
            raise ToolPolicyError(f"Tool '{definition.name}' is disabled by policy.")
        if policy.allowed_users is not None and ctx.user_id not in policy.allowed_users:
            raise ToolPolicyError(f"User '{ctx.user_id}' not allowed for tool '{definition.name}'.")
        if policy.requires_approval and not ctx.approved:
            raise ToolPolicyError(f"Tool '{definition.name}' requires approval before execution.")
