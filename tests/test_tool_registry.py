"""Tests for the tool registry: schema validation, duplicates, provider descriptors."""

import pytest

from app.services.ai.tools import Tool, ToolRegistry
from app.services.errors import DuplicateToolError, InvalidSchemaError, ToolRegistrationError


class StubTool(Tool):
    def __init__(self, name="lookup_city", schema=None, description="Look up a city", requirements=None):
        self.name = name
        self.description = description
        self._schema = schema if schema is not None else {
            "type": "object",
            "properties": {"city": {"type": "string"}},
        }
        self._requirements = requirements or {}

    @property
    def parameters(self):
        return self._schema

    @property
    def requirements(self):
        return self._requirements

    async def execute(self, params):
        return {"city": params.get("city")}


class TestRegisterTool:
    def test_register_and_get(self):
        registry = ToolRegistry()
        tool = StubTool()
        registry.register_tool(tool)

        assert registry.get_tool("lookup_city") is tool
        assert "lookup_city" in registry
        assert len(registry) == 1

    def test_unknown_tool_is_none(self):
        assert ToolRegistry().get_tool("missing") is None

    def test_duplicate_keeps_first_tool(self):
        registry = ToolRegistry()
        first = StubTool(description="first")
        second = StubTool(description="second")
        registry.register_tool(first)

        with pytest.raises(DuplicateToolError):
            registry.register_tool(second)

        assert registry.get_tool("lookup_city") is first
        assert registry.list_tools() == [first]

    def test_none_tool_rejected(self):
        with pytest.raises(ToolRegistrationError):
            ToolRegistry().register_tool(None)

    @pytest.mark.parametrize(
        "schema, fragment",
        [
            ({"properties": {"city": {"type": "string"}}}, "'type'"),
            ({"type": "object"}, "'properties'"),
            ({"type": "object", "properties": {"city": {"description": "no type"}}}, "parameter 'city'"),
            ({"type": "object", "properties": ["city"]}, "'properties'"),
        ],
    )
    def test_malformed_schema_rejected(self, schema, fragment):
        registry = ToolRegistry()
        with pytest.raises(InvalidSchemaError) as exc_info:
            registry.register_tool(StubTool(schema=schema))

        assert fragment in str(exc_info.value)
        assert len(registry) == 0


class TestProviderTools:
    def test_descriptor_format(self):
        registry = ToolRegistry()
        registry.register_tool(StubTool())

        assert registry.list_provider_tools() == [
            {
                "type": "function",
                "function": {
                    "name": "lookup_city",
                    "description": "Look up a city",
                    "parameters": {"type": "object", "properties": {"city": {"type": "string"}}},
                },
            }
        ]

    def test_requirements_included_when_declared(self):
        registry = ToolRegistry()
        registry.register_tool(StubTool(requirements={"network": True}))

        function = registry.list_provider_tools()[0]["function"]
        assert function["requirements"] == {"network": True}

    def test_empty_registry(self):
        registry = ToolRegistry()
        assert registry.list_tools() == []
        assert registry.list_provider_tools() == []
