"""Process-wide catalogue of PlumChat tools."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

import yaml

from plumchat.tools.base import ToolDefinition, ToolPolicy

logger = logging.getLogger(__name__)


class ToolRegistry:
    _definitions: dict[str, ToolDefinition] = {}
    _handlers: dict[str, Callable[..., Any]] = {}

    @classmethod
    def register(cls, definition: ToolDefinition, handler: Callable[..., Any]) -> None:
        cls._definitions[definition.name] = definition
        cls._handlers[definition.name] = handler
        logger.debug(f"Registered tool: {definition.name} ({definition.category})")

    @classmethod
    def get_definition(cls, name: str) -> ToolDefinition | None:
        return cls._definitions.get(name)

    @classmethod
    def get_handler(cls, name: str) -> Callable[..., Any] | None:
        return cls._handlers.get(name)

    @classmethod
    def list_definitions(cls) -> list[ToolDefinition]:
        return list(cls._definitions.values())

    @classmethod
    def llm_functions(cls, user_id: str | None = None) -> list[dict[str, Any]]:
        """Function specs for every enabled tool the user may call."""
        return [
            definition.as_llm_function()
            for definition in cls._definitions.values()
            if definition.policy.enabled
            and (
                definition.policy.allowed_users is None
                or user_id in definition.policy.allowed_users
            )
        ]

    @classmethod
    def load_policy_config(cls, path: str | Path) -> None:
        """
        Apply per-tool policy overrides from YAML:

            tools:
              - name: execute_query
                max_execution_time_seconds: 60
                allowed_users: [analyst]

        Entries for unregistered tools are ignored. Invalid values raise
        ``pydantic.ValidationError``.
        """
        policy_path = Path(path)
        if not policy_path.exists():
            logger.warning(f"Tool policy file not found: {policy_path}")
            return

        config = yaml.safe_load(policy_path.read_text()) or {}
        for entry in config.get("tools", []):
            name = entry.get("name")
            definition = cls._definitions.get(name) if name else None
            if definition is None:
                logger.debug(f"Ignoring policy for unregistered tool: {name}")
                continue

            merged = definition.policy.model_dump()
            merged.update({key: value for key, value in entry.items() if key in merged})
            cls._definitions[name] = definition.model_copy(
                update={"policy": ToolPolicy.model_validate(merged)}
            )
            logger.info(f"Applied policy override for tool: {name}")
