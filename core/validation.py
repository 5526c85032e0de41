# =============================================================================
# core/validation.py  —  Input checks that run BEFORE any handler
# =============================================================================
#
# Two layers of checking:
#
#   1. Shape of the call itself (every tool):
#        validate_tool_name()  → the name is a non-empty string
#        validate_arguments()  → the arguments, if present, are an object
#
#   2. Shape of one tool's arguments (per tool):
#        parse_*_arguments()   → raw mapping in, typed arguments out
#
# Handlers only ever see the typed objects produced by layer 2, so a handler
# never has to ask "is this really a list of strings?".
#
# Every function here is pure: it returns either a value or a ToolError and
# never raises for bad input.
# =============================================================================

from dataclasses import dataclass
from typing import Any, Mapping

from core.errors import invalid_params
from core.models import ToolError


def validate_tool_name(name: Any) -> ToolError | None:
    """Return an InvalidParams error unless `name` is a non-empty string."""
    if not isinstance(name, str) or not name:
        return invalid_params("Tool name must be a non-empty string")
    return None


def validate_arguments(arguments: Any) -> ToolError | None:
    """Return an InvalidParams error if `arguments` is present but not an object."""
    if arguments is not None and not isinstance(arguments, Mapping):
        return invalid_params("Tool parameters must be an object")
    return None


# -----------------------------------------------------------------------------
# Typed arguments, one per tool family
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class NoArguments:
    """Arguments of a tool that takes none."""


@dataclass(frozen=True)
class HelloArguments:
    name: str | None = None        # Already trimmed; None when blank or absent


@dataclass(frozen=True)
class ReviewArguments:
    prompts: tuple[str, ...]


def parse_no_arguments(arguments: Mapping[str, Any]) -> NoArguments:
    # Extra keys are ignored; MCP clients sometimes send an empty object
    # with bookkeeping fields.
    return NoArguments()


def parse_hello_arguments(arguments: Mapping[str, Any]) -> HelloArguments:
    """Keep `name` only if it is a string with something besides whitespace."""
    name = arguments.get("name")
    if isinstance(name, str) and name.strip():
        return HelloArguments(name=name.strip())
    return HelloArguments()


def parse_review_arguments(arguments: Mapping[str, Any]) -> ReviewArguments | ToolError:
    """Require `prompts` to be a non-empty list whose items are all strings.

    Each failure has its own message so the caller can tell a missing list
    from an empty one from a list with a stray number in it.
    """
    prompts = arguments.get("prompts")

    if not isinstance(prompts, (list, tuple)):
        return invalid_params("prompts parameter is required and must be an array")

    if len(prompts) == 0:
        return invalid_params("prompts array cannot be empty")

    if any(not isinstance(prompt, str) for prompt in prompts):
        return invalid_params("All prompts must be strings")

    return ReviewArguments(prompts=tuple(prompts))
