# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the tool server)
# =============================================================================
#
# These dataclasses define the shape of everything that crosses the
# dispatcher boundary:
#
#   ToolDescriptor     → what `list tools` returns (one per tool)
#   InvocationRequest  → what `call tool` hands to the dispatcher
#   ToolResult         → a successful call: an ordered list of text items
#   ToolError          → a failed call: an error code plus a message
#
# Every dispatch ends in exactly ONE ToolResult or exactly ONE ToolError.
# The union of the two is spelled `ToolOutcome` below.
#
# ERROR CODES:
#   The numeric values are the JSON-RPC 2.0 error codes.
# =============================================================================

from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType
from typing import Any, Mapping, Union


class ErrorCode(IntEnum):
    """Error categories a tool call can end in."""

    INVALID_PARAMS = -32602     # Malformed or missing caller input
    METHOD_NOT_FOUND = -32601   # Unknown tool name
    INTERNAL_ERROR = -32603     # Everything else (downstream, invariants)


# -----------------------------------------------------------------------------
# ToolDescriptor — the discovery record for one tool
# -----------------------------------------------------------------------------
# Created once at startup by the registry and never mutated.  The input
# schema is frozen all the way down (mappings become read-only proxies,
# lists become tuples) so a caller holding a descriptor cannot change what
# the next `list tools` returns.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolDescriptor:
    """Name, description and JSON-Schema of a single tool."""

    name: str
    description: str
    input_schema: Mapping[str, Any] = field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )

    def __post_init__(self):
        object.__setattr__(self, "input_schema", _freeze(self.input_schema))

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form, as sent over the wire."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": _thaw(self.input_schema),
        }


@dataclass(frozen=True)
class InvocationRequest:
    """A single `call tool` request: which tool, with which arguments."""

    tool_name: Any                 # Checked by the validator, not trusted here
    arguments: Any = None          # None means "no arguments"


@dataclass(frozen=True)
class TextContent:
    """One text item of a tool result."""

    text: str
    type: str = "text"


@dataclass(frozen=True)
class ToolResult:
    """A successful tool call."""

    content: tuple[TextContent, ...]

    @classmethod
    def text(cls, text: str) -> "ToolResult":
        """Build the usual single-item text result."""
        return cls(content=(TextContent(text=text),))

    def to_dict(self) -> dict[str, Any]:
        return {"content": [{"type": item.type, "text": item.text} for item in self.content]}


@dataclass(frozen=True)
class ToolError:
    """A failed tool call."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.message} (code {int(self.code)})"

    def to_dict(self) -> dict[str, Any]:
        return {"code": int(self.code), "message": self.message}


ToolOutcome = Union[ToolResult, ToolError]


def _freeze(value: Any) -> Any:
    """Recursively turn mappings into read-only proxies and lists into tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    """Recursively turn read-only mappings back into plain dicts."""
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_thaw(item) for item in value]
    return value
