# =============================================================================
# core/registry.py  —  The static tool table
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Maps each tool name to three things:
#     - its descriptor (name, description, JSON input schema) for discovery
#     - its argument parser (core/validation.py) for per-tool checking
#     - its handler (core/handlers.py) for execution
#
# The registry is built once at startup and cannot change afterwards: no
# register/unregister at runtime.  `list()` always returns the same tuple,
# in registration order.
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Mapping

from core import handlers
from core.models import ToolDescriptor, ToolError
from core.validation import parse_hello_arguments, parse_no_arguments, parse_review_arguments

logger = logging.getLogger(__name__)

ArgumentParser = Callable[[Mapping[str, Any]], Any]
Handler = Callable[[Any, Any], Awaitable["str | ToolError"]]


@dataclass(frozen=True)
class ToolSpec:
    """Everything the dispatcher needs to run one tool."""

    descriptor: ToolDescriptor
    parse: ArgumentParser
    handler: Handler

    @property
    def name(self) -> str:
        return self.descriptor.name


class ToolRegistry:
    """Immutable, ordered collection of tools."""

    def __init__(self, specs: Iterable[ToolSpec]):
        specs = tuple(specs)
        index: dict[str, ToolSpec] = {}
        for spec in specs:
            if spec.name in index:
                raise ValueError(f"Duplicate tool name: {spec.name}")
            index[spec.name] = spec

        self._specs = specs
        self._index = index
        self._descriptors = tuple(spec.descriptor for spec in specs)

    def list(self) -> tuple[ToolDescriptor, ...]:
        """All descriptors, in registration order."""
        return self._descriptors

    def lookup(self, name: str) -> ToolSpec | None:
        return self._index.get(name)

    def names(self) -> tuple[str, ...]:
        return tuple(self._index)

    def __len__(self) -> int:
        return len(self._specs)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __repr__(self) -> str:
        return f"ToolRegistry({', '.join(self._index)})"


def _empty_schema() -> dict:
    return {"type": "object", "properties": {}}


def build_registry() -> ToolRegistry:
    """Build the registry of every tool this server exposes.

    The order here is the order clients see in `list tools`.
    """
    registry = ToolRegistry([
        ToolSpec(
            descriptor=ToolDescriptor(
                name="say_hello",
                description="Get a friendly hello message from the server",
                input_schema={
                    "type": "object",
                    "properties": {
                        "name": {
                            "type": "string",
                            "description": "Optional name to personalize the greeting",
                        },
                    },
                },
            ),
            parse=parse_hello_arguments,
            handler=handlers.say_hello,
        ),
        ToolSpec(
            descriptor=ToolDescriptor(
                name="get_current_time",
                description="Get the current local date, time and timezone of the server",
                input_schema=_empty_schema(),
            ),
            parse=parse_no_arguments,
            handler=handlers.get_current_time,
        ),
        ToolSpec(
            descriptor=ToolDescriptor(
                name="server_info",
                description="Get the server's name, version, capabilities and uptime",
                input_schema=_empty_schema(),
            ),
            parse=parse_no_arguments,
            handler=handlers.server_info,
        ),
        ToolSpec(
            descriptor=ToolDescriptor(
                name="test_gemini",
                description="Test connectivity to the Gemini API",
                input_schema=_empty_schema(),
            ),
            parse=parse_no_arguments,
            handler=handlers.test_gemini,
        ),
        ToolSpec(
            descriptor=ToolDescriptor(
                name="review_prompts",
                description="Review a list of prompts from a conversation",
                input_schema={
                    "type": "object",
                    "properties": {
                        "prompts": {
                            "type": "array",
                            "description": "List of prompts from the conversation to review",
                            "items": {"type": "string"},
                        },
                    },
                    "required": ["prompts"],
                },
            ),
            parse=parse_review_arguments,
            handler=handlers.review_prompts,
        ),
    ])
    logger.debug("Built tool registry: %s", registry)
    return registry
