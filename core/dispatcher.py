# =============================================================================
# core/dispatcher.py  —  Request → exactly one ToolResult or ToolError
# =============================================================================
#
# HOW A CALL FLOWS:
#   1. Readiness check      → InternalError if built without registry/context
#   2. Shape validation     → InvalidParams (name, argument object)
#   3. Registry lookup      → MethodNotFound "Unknown tool: <name>"
#   4. Per-tool parsing     → InvalidParams with the tool's own message
#   5. Handler execution    → text, or the handler's own ToolError
#   6. Result check         → InternalError if the text is empty / not text
#   7. Exception boundary   → ToolFailure passes through unchanged,
#                             anything else becomes
#                             InternalError "Tool execution failed: <msg>"
#
# The dispatcher holds no per-call state, so overlapping calls need no
# locking.  Nothing here retries.
# =============================================================================

import json
import logging
from typing import Any, Mapping

from core.context import ServerContext
from core.errors import ToolFailure, internal_error, method_not_found
from core.models import ErrorCode, InvocationRequest, ToolDescriptor, ToolError, ToolOutcome, ToolResult
from core.registry import ToolRegistry
from core.validation import validate_arguments, validate_tool_name

logger = logging.getLogger(__name__)

_MAX_LOGGED_VALUE = 80


def summarize_arguments(arguments: Any) -> str:
    """Compact, size-bounded description of call arguments for logs."""
    if not isinstance(arguments, Mapping):
        return repr(type(arguments).__name__) if arguments is not None else "{}"

    summary = {}
    for key, value in arguments.items():
        if isinstance(value, str):
            shown = value if len(value) <= _MAX_LOGGED_VALUE else f"<{len(value)} chars>"
        elif isinstance(value, (list, tuple)):
            shown = f"<{len(value)} items>"
        elif isinstance(value, Mapping):
            shown = f"<{len(value)} keys>"
        else:
            shown = value if isinstance(value, (int, float, bool)) or value is None else type(value).__name__
        summary[str(key)] = shown
    return json.dumps(summary, separators=(",", ":"), default=str)


class Dispatcher:
    """Routes validated invocations to handlers and normalises the outcome."""

    def __init__(self, registry: ToolRegistry, context: ServerContext):
        self.registry = registry
        self.context = context

    @property
    def ready(self) -> bool:
        return self.registry is not None and self.context is not None

    # -------------------------------------------------------------------------
    # list tools
    # -------------------------------------------------------------------------
    def list_tools(self) -> tuple[ToolDescriptor, ...]:
        """Return every tool descriptor, in registration order.

        Raises:
            ToolFailure: InternalError if the tool list cannot be produced.
        """
        logger.info("Received tools list request")
        try:
            if not self.ready:
                raise ToolFailure(internal_error("Server not properly initialized"))
            tools = self.registry.list()
        except ToolFailure as e:
            logger.error("Failed to list tools: %s", e)
            raise
        except Exception as e:
            logger.exception("Failed to list tools")
            raise ToolFailure(internal_error("Failed to retrieve tools list")) from e

        logger.info("Returning %d available tools", len(tools))
        return tools

    # -------------------------------------------------------------------------
    # call tool
    # -------------------------------------------------------------------------
    async def dispatch(self, request: InvocationRequest) -> ToolOutcome:
        """Run one tool call and return its result or its error.

        Never raises for tool-level failures; see the module header for the
        order of checks.
        """
        outcome = await self._dispatch(request)

        if isinstance(outcome, ToolError):
            log = logger.error if outcome.code == ErrorCode.INTERNAL_ERROR else logger.warning
            log(
                "Tool call failed: tool=%s code=%s message=%s",
                request.tool_name, outcome.code.name, outcome.message,
            )
        else:
            logger.info(
                "Tool call succeeded: tool=%s response_length=%d",
                request.tool_name, sum(len(item.text) for item in outcome.content),
            )
        return outcome

    async def _dispatch(self, request: InvocationRequest) -> ToolOutcome:
        if not self.ready:
            return internal_error("Server not properly initialized")

        name, arguments = request.tool_name, request.arguments
        logger.info("Received tool call request: tool=%r args=%s", name, summarize_arguments(arguments))

        error = validate_tool_name(name) or validate_arguments(arguments)
        if error is not None:
            return error

        spec = self.registry.lookup(name)
        if spec is None:
            logger.warning("Unknown tool %r; available tools: %s", name, ", ".join(self.registry.names()))
            return method_not_found(f"Unknown tool: {name}")

        try:
            parsed = spec.parse(arguments or {})
            if isinstance(parsed, ToolError):
                return parsed

            result = await spec.handler(parsed, self.context)
        except ToolFailure as e:
            return e.error
        except Exception as e:
            logger.exception("Tool %s raised", name)
            return internal_error(f"Tool execution failed: {e}")

        if isinstance(result, ToolError):
            return result
        if not isinstance(result, str) or not result:
            return internal_error(f"Tool {name} returned an empty or invalid result")
        return ToolResult.text(result)
