"""
Tests for the immutable tool registry.
"""

import pytest

from core.models import ToolDescriptor
from core.registry import ToolRegistry, ToolSpec
from core.validation import parse_no_arguments


async def _noop(arguments, context):
    return "ok"


def _spec(name):
    return ToolSpec(
        descriptor=ToolDescriptor(name=name, description=f"{name} tool"),
        parse=parse_no_arguments,
        handler=_noop,
    )


class TestDefaultRegistry:

    def test_registration_order(self, registry):
        assert [tool.name for tool in registry.list()] == [
            "say_hello",
            "get_current_time",
            "server_info",
            "test_gemini",
            "review_prompts",
        ]

    def test_list_is_idempotent(self, registry):
        first = registry.list()
        second = registry.list()

        assert first == second
        assert [t.name for t in first] == [t.name for t in second]

    def test_lookup(self, registry):
        assert registry.lookup("say_hello").name == "say_hello"
        assert registry.lookup("does_not_exist") is None
        assert "review_prompts" in registry
        assert len(registry) == 5

    def test_review_prompts_schema(self, registry):
        wire = registry.lookup("review_prompts").descriptor.to_dict()

        assert wire["inputSchema"]["required"] == ["prompts"]
        assert wire["inputSchema"]["properties"]["prompts"]["items"] == {"type": "string"}

    def test_descriptor_schema_is_read_only(self, registry):
        descriptor = registry.list()[0]

        with pytest.raises(TypeError):
            descriptor.input_schema["type"] = "array"

    def test_nested_schema_is_read_only(self, registry):
        schema = registry.lookup("review_prompts").descriptor.input_schema

        with pytest.raises(TypeError):
            schema["properties"]["prompts"]["type"] = "object"
        with pytest.raises(AttributeError):
            schema["required"].append("extra")

        wire = registry.lookup("review_prompts").descriptor.to_dict()
        assert wire["inputSchema"]["properties"]["prompts"]["type"] == "array"
        assert wire["inputSchema"]["required"] == ["prompts"]

    def test_to_dict_returns_a_fresh_copy(self, registry):
        descriptor = registry.lookup("say_hello").descriptor

        wire = descriptor.to_dict()
        wire["inputSchema"]["properties"]["name"]["type"] = "number"

        assert descriptor.to_dict()["inputSchema"]["properties"]["name"]["type"] == "string"

    def test_empty_schemas_are_not_shared(self, registry):
        names = ("get_current_time", "server_info", "test_gemini")
        properties = [registry.lookup(name).descriptor.input_schema["properties"] for name in names]

        assert len({id(item) for item in properties}) == len(names)

    def test_caller_dict_is_copied(self):
        schema = {"type": "object", "properties": {"x": {"type": "string"}}}
        descriptor = ToolDescriptor(name="echo", description="echo tool", input_schema=schema)

        schema["properties"]["x"]["type"] = "number"

        assert descriptor.input_schema["properties"]["x"]["type"] == "string"


class TestToolRegistry:

    def test_duplicate_names_rejected(self):
        with pytest.raises(ValueError, match="Duplicate tool name: echo"):
            ToolRegistry([_spec("echo"), _spec("echo")])

    def test_names_keep_order(self):
        registry = ToolRegistry([_spec("b"), _spec("a"), _spec("c")])

        assert registry.names() == ("b", "a", "c")
