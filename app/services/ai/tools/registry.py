"""Tool registry — keyed collection of tools offered to the provider."""

import logging
from typing import Any

from app.services.ai.tools.base import Tool
from app.services.errors import DuplicateToolError, InvalidSchemaError, ToolRegistrationError

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Holds the tools one inference engine may expose.

    Not synchronised: register everything at startup, then only read.
    """

    def __init__(self):
        self._tools: dict[str, Tool] = {}

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def register_tool(self, tool: Tool) -> None:
        if tool is None:
            raise ToolRegistrationError("tool cannot be None")

        name = tool.name
        if not name:
            raise ToolRegistrationError("tool must have a name")
        if name in self._tools:
            raise DuplicateToolError(f"tool '{name}' already registered")

        self._validate_schema(name, tool.parameters)

        self._tools[name] = tool
        logger.info(f"Registered tool '{name}'")

    @staticmethod
    def _validate_schema(name: str, schema: Any) -> None:
        if not isinstance(schema, dict):
            raise InvalidSchemaError(f"tool '{name}' must provide parameters schema")
        if "type" not in schema:
            raise InvalidSchemaError(f"tool '{name}' parameters schema must include 'type' field")
        if "properties" not in schema:
            raise InvalidSchemaError(f"tool '{name}' parameters schema must include 'properties' field")

        properties = schema["properties"]
        if not isinstance(properties, dict):
            raise InvalidSchemaError(f"tool '{name}' 'properties' must be an object")
        for prop_name, prop_schema in properties.items():
            if not isinstance(prop_schema, dict) or "type" not in prop_schema:
                raise InvalidSchemaError(f"tool '{name}' parameter '{prop_name}' must specify type")

    def get_tool(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def list_tools(self) -> list[Tool]:
        return list(self._tools.values())

    def list_provider_tools(self) -> list[dict[str, Any]]:
        """Tool descriptors in the chat-completions ``tools`` format."""
        descriptors = []
        for tool in self._tools.values():
            function: dict[str, Any] = {
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.parameters,
            }
            if tool.requirements:
                function["requirements"] = tool.requirements
            descriptors.append({"type": "function", "function": function})
        return descriptors
