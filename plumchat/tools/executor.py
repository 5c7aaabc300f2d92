"""Runs registered tools under their policy and time limit."""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections.abc import Callable
from typing import Any

from plumchat.tools.base import ToolContext, ToolDefinition, context_param
from plumchat.tools.policy import PolicyEngine, ToolPolicyError
from plumchat.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


class ToolExecutionError(Exception):
    pass


class ToolExecutor:
    """
    Tool call dispatcher.

    Usage:
        executor = ToolExecutor()
        response = await executor.execute("execute_query", {"sql": "SELECT 1"}, ctx)
        response["result"]  # tool output
    """

    def __init__(self, policy_engine: PolicyEngine | None = None) -> None:
        self.policy_engine = policy_engine or PolicyEngine()

    async def execute(self, name: str, args: dict[str, Any], ctx: ToolContext) -> dict[str, Any]:
        """
        Run one tool call.

        Raises:
            ToolPolicyError: If policy forbids this call
            ToolExecutionError: If the tool is unknown, fails, or exceeds its time limit
        """
        definition, handler = self._lookup(name)
        self.policy_engine.enforce(definition, ctx)

        time_limit = definition.policy.max_execution_time_seconds
        ctx.log_action("tool_invoked", {"tool": name, "args": sorted(args)})
        start_time = time.perf_counter()

        try:
            result = await asyncio.wait_for(self._invoke(handler, args, ctx), timeout=time_limit)
        except ToolPolicyError:
            raise
        except asyncio.TimeoutError as exc:
            logger.error(f"Tool '{name}' exceeded its {time_limit}s limit")
            raise ToolExecutionError(f"Tool '{name}' timed out after {time_limit}s") from exc
        except Exception as exc:
            logger.error(f"Tool '{name}' failed: {exc}")
            raise ToolExecutionError(str(exc)) from exc

        duration_ms = int((time.perf_counter() - start_time) * 1000)
        ctx.log_action("tool_completed", {"tool": name, "duration_ms": duration_ms})
        return {"tool": name, "success": True, "result": result, "duration_ms": duration_ms}

    @staticmethod
    def _lookup(name: str) -> tuple[ToolDefinition, Callable[..., Any]]:
        definition = ToolRegistry.get_definition(name)
        handler = ToolRegistry.get_handler(name)
        if definition is None or handler is None:
            raise ToolExecutionError(f"Unknown tool: {name}")
        return definition, handler

    @staticmethod
    async def _invoke(handler: Callable[..., Any], args: dict[str, Any], ctx: ToolContext) -> Any:
        kwargs = dict(args)
        ctx_name = context_param(handler)
        if ctx_name:
            kwargs[ctx_name] = ctx
        result = handler(**kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result
