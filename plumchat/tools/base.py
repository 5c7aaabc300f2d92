"""
Tool declarations.

A tool is a plain (usually async) function decorated with ``@tool``. The
decorator derives a JSON schema for its arguments and registers it, with
its policy, in the ``ToolRegistry`` so the LLM layer can advertise it and
the ``ToolExecutor`` can run it.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from enum import StrEnum
from typing import Any, get_type_hints

from pydantic import BaseModel, Field, TypeAdapter

logger = logging.getLogger(__name__)

CONTEXT_PARAMS = ("ctx", "context")


class ToolCategory(StrEnum):
    QUERY = "query"
    SCHEMA = "schema"
    SYSTEM = "system"


class ToolPolicy(BaseModel):
    """Who may run a tool, and for how long."""

    enabled: bool = True
    requires_approval: bool = False
    max_execution_time_seconds: int = Field(default=30, ge=1)
    allowed_users: list[str] | None = None


class ToolDefinition(BaseModel):
    name: str
    description: str
    category: ToolCategory
    policy: ToolPolicy = Field(default_factory=ToolPolicy)
    parameters_schema: dict[str, Any]

    def as_llm_function(self) -> dict[str, Any]:
        """Function-calling spec handed to the LLM."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters_schema,
            },
        }


class ToolContext(BaseModel):
    """Caller identity and request metadata for one tool call."""

    user_id: str
    correlation_id: str
    approved: bool = False
    metadata: dict[str, Any] = Field(default_factory=dict)

    def log_action(self, action: str, details: dict[str, Any]) -> None:
        logger.info(
            action,
            extra={
                "user_id": self.user_id,
                "correlation_id": self.correlation_id,
                "tool_details": details,
            },
        )


def context_param(func: Callable[..., Any]) -> str | None:
    """Name of the handler parameter that receives the ToolContext, if any."""
    parameters = inspect.signature(func).parameters
    return next((name for name in CONTEXT_PARAMS if name in parameters), None)


def parameters_schema(func: Callable[..., Any]) -> dict[str, Any]:
    """JSON schema of a handler's arguments; the context parameter is left out."""
    hints = get_type_hints(func)
    schema: dict[str, Any] = {
        "type": "object",
        "properties": {},
        "required": [],
        "additionalProperties": False,
    }

    for name, param in inspect.signature(func).parameters.items():
        if name in CONTEXT_PARAMS:
            continue
        prop = TypeAdapter(hints.get(name, Any)).json_schema()
        if param.default is inspect.Parameter.empty:
            schema["required"].append(name)
        elif param.default is not None:
            prop["default"] = param.default
        schema["properties"][name] = prop

    return schema


def tool(
    name: str,
    description: str,
    category: ToolCategory,
    requires_approval: bool = False,
    **policy_options: Any,
):
    """Register the decorated function as a tool; the function itself is returned unchanged."""

    def register(func: Callable[..., Any]):
        from plumchat.tools.registry import ToolRegistry

        ToolRegistry.register(
            ToolDefinition(
                name=name,
                description=description,
                category=category,
                policy=ToolPolicy(requires_approval=requires_approval, **policy_options),
                parameters_schema=parameters_schema(func),
            ),
            func,
        )
        return func

    return register
