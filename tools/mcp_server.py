# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (transport bridge)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes every tool in the core registry over MCP.  FastMCP owns the
#   protocol and the stdio transport; the core Dispatcher owns everything
#   else (validation, routing, error normalisation).
#
# HOW IT WORKS (the flow):
#   1. The orchestrating agent asks for the tool list
#   2. FastMCP answers from the DispatchedTool objects registered below,
#      one per registry descriptor (same name, description, JSON schema)
#   3. The agent calls a tool by name with an argument object
#   4. DispatchedTool.run() hands the RAW arguments to Dispatcher.dispatch()
#   5. A ToolResult becomes MCP text content; a ToolError is raised as a
#      FastMCP ToolError so the client receives an error result
#
#   FastMCP's signature-based validation is not used; raw arguments reach
#   the dispatcher's validators untouched.
#
# RUNNING THIS SERVER:
#   Use main.py, which also loads .env and installs signal handlers:
#       python main.py
# =============================================================================

import logging
import sys
from typing import Any

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError as MCPToolError
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult as MCPToolResult
from mcp.types import TextContent as MCPTextContent
from pydantic import PrivateAttr

from core.dispatcher import Dispatcher
from core.models import InvocationRequest, ToolDescriptor, ToolError

# =============================================================================
# Logging Setup
# =============================================================================
# We log to STDERR because the MCP server talks to the agent over STDOUT.
# A single log line on stdout would corrupt the JSON-RPC stream.
#
# ANSI colours make tool traffic easy to scan:
#   CYAN   → incoming tool calls
#   YELLOW → status / progress
#   GREEN  → responses
#   RED    → error results
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_RESET = "\033[0m"

LOG_FORMAT = "%(asctime)s [MCP] %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger("tools.mcp_server")


APP_LOGGERS = ("core", "tools", "main")


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stderr in the server's format.

    The root logger, and with it httpx, mcp and google-genai, stays at
    WARNING. `level` applies only to the loggers named in APP_LOGGERS.
    """
    logging.basicConfig(
        level=logging.WARNING,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
    app_level = getattr(logging, level.upper(), logging.INFO)
    for name in APP_LOGGERS:
        logging.getLogger(name).setLevel(app_level)


def _log_request(tool_name: str, arguments: Any) -> None:
    keys = ", ".join(sorted(map(str, arguments))) if isinstance(arguments, dict) else "-"
    logger.info(f"{_CYAN}{tool_name} called with: {keys or '-'}{_RESET}")


def _log_status(message: str) -> None:
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: MCPToolResult) -> MCPToolResult:
    length = sum(len(getattr(block, "text", "")) for block in result.content)
    logger.info(f"{_GREEN}  ← {tool_name} response: {length} characters{_RESET}")
    return result


def _log_error(tool_name: str, error: ToolError) -> None:
    logger.info(f"{_RED}  ← {tool_name} error: {error}{_RESET}")


# =============================================================================
# DispatchedTool — one FastMCP tool per registry descriptor
# =============================================================================
class DispatchedTool(Tool):
    """A FastMCP tool whose every call goes through the core Dispatcher."""

    _dispatcher: Dispatcher | None = PrivateAttr(default=None)

    @classmethod
    def from_descriptor(cls, descriptor: ToolDescriptor, dispatcher: Dispatcher) -> "DispatchedTool":
        wire = descriptor.to_dict()
        tool = cls(
            name=wire["name"],
            description=wire["description"],
            parameters=wire["inputSchema"],
        )
        tool._dispatcher = dispatcher
        return tool

    async def run(self, arguments: dict[str, Any]) -> MCPToolResult:
        _log_request(self.name, arguments)

        outcome = await self._dispatcher.dispatch(InvocationRequest(self.name, arguments))

        if isinstance(outcome, ToolError):
            _log_error(self.name, outcome)
            raise MCPToolError(str(outcome))

        result = MCPToolResult(
            content=[MCPTextContent(type="text", text=item.text) for item in outcome.content],
        )
        return _log_response(self.name, result)


# =============================================================================
# Server factory
# =============================================================================
def create_server(dispatcher: Dispatcher) -> FastMCP:
    """Create the FastMCP server exposing every tool the dispatcher knows.

    Args:
        dispatcher: The core dispatcher, already built with its registry and
            context.

    Returns:
        A FastMCP instance ready for `run_async(transport="stdio")`.
    """
    settings = dispatcher.context.settings
    mcp = FastMCP(settings.server_name, version=settings.server_version)

    for descriptor in dispatcher.list_tools():
        mcp.add_tool(DispatchedTool.from_descriptor(descriptor, dispatcher))
        _log_status(f"Registered tool: {descriptor.name}")

    return mcp
