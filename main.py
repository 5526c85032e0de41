# =============================================================================
# main.py  —  Entry Point for the Prompt Mentor MCP server
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py
#
# WHAT HAPPENS:
#   1. Loads .env (GEMINI_API_KEY, GEMINI_MODEL, MCP_LOG_LEVEL)
#   2. Builds the tool registry, the server context and the dispatcher
#   3. Wraps them in a FastMCP server (tools/mcp_server.py)
#   4. Serves MCP over stdin/stdout until the client disconnects or a
#      termination signal arrives
#
# EXIT CODES:
#   0 → graceful shutdown (SIGINT / SIGTERM, or the client closed stdin)
#   1 → startup failure, uncaught fault, or an unhandled asyncio exception
# =============================================================================

import asyncio
import logging
import os
import signal
import sys

from dotenv import load_dotenv

# Load environment variables from .env before reading any settings.
load_dotenv()

from core.config import load_settings
from core.context import ServerContext
from core.dispatcher import Dispatcher
from core.registry import build_registry
from tools.mcp_server import configure_logging, create_server

logger = logging.getLogger("main")


class ProcessShell:
    """Owns the serving task, signal handling and the final exit code."""

    def __init__(self):
        self.exit_code = 0
        self._task: asyncio.Task | None = None
        self._stopping = asyncio.Event()

    @property
    def stopped(self) -> bool:
        """True once a signal or a loop fault ended serving early."""
        return self._stopping.is_set()

    def request_shutdown(self, signame: str) -> None:
        logger.info("Received %s, shutting down", signame)
        self._stopping.set()

    def handle_loop_exception(self, loop: asyncio.AbstractEventLoop, context: dict) -> None:
        # Unhandled exceptions in background callbacks/tasks: log, then stop
        # serving with exit code 1.
        error = context.get("exception")
        logger.critical("Unhandled asyncio exception: %s", context.get("message"), exc_info=error)
        self.exit_code = 1
        self._stopping.set()

    def _install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.request_shutdown, sig.name)
            except NotImplementedError:
                # Windows event loops have no add_signal_handler.
                signal.signal(sig, lambda signum, frame: loop.call_soon_threadsafe(
                    self.request_shutdown, signal.Signals(signum).name))

    async def serve(self, server) -> int:
        """Serve until the transport ends or a shutdown is requested.

        The stdio transport reads stdin from a worker thread that cannot be
        interrupted, so on shutdown the serving task is cancelled but not
        awaited.
        """
        loop = asyncio.get_running_loop()
        loop.set_exception_handler(self.handle_loop_exception)
        self._install_signal_handlers(loop)

        self._task = asyncio.ensure_future(server.run_async(transport="stdio", show_banner=False))
        stop_requested = asyncio.ensure_future(self._stopping.wait())
        logger.info("Serving MCP over stdio")

        await asyncio.wait({self._task, stop_requested}, return_when=asyncio.FIRST_COMPLETED)

        if self._task.done():
            stop_requested.cancel()
            self._task.result()
        else:
            self._task.cancel()
        logger.info("Server stopped")
        return self.exit_code


def _exit_now(exit_code: int) -> None:
    """End the process without joining the blocked stdin reader thread."""
    logging.shutdown()
    sys.stdout.flush()
    sys.stderr.flush()
    os._exit(exit_code)


def run(shell: ProcessShell, server) -> int:
    """Drive `shell.serve()` on a fresh event loop and return its exit code."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        exit_code = loop.run_until_complete(shell.serve(server))
    except Exception:
        logger.critical("Fatal error in MCP server", exc_info=True)
        _exit_now(1)

    if shell.stopped:
        _exit_now(exit_code)

    loop.run_until_complete(loop.shutdown_asyncgens())
    loop.close()
    return exit_code


def build_server():
    """Wire settings, registry, context and dispatcher into a FastMCP server."""
    settings = load_settings()
    configure_logging(settings.log_level)
    logger.info("Starting MCP server...")

    registry = build_registry()
    context = ServerContext(settings=settings, tool_names=registry.names())
    dispatcher = Dispatcher(registry, context)

    if not settings.has_api_key:
        logger.warning("GEMINI_API_KEY is not set; test_gemini and review_prompts will fail")

    return create_server(dispatcher), settings, registry


def main() -> int:
    try:
        server, settings, registry = build_server()
        logger.info(f"{settings.server_name} v{settings.server_version} is running and ready to accept requests")
        logger.info(f"Available tools: {', '.join(registry.names())}")
        return run(ProcessShell(), server)
    except KeyboardInterrupt:
        return 0
    except Exception:
        logger.critical("Fatal error in MCP server", exc_info=True)
        return 1


# =============================================================================
# Script entry point
# =============================================================================
if __name__ == "__main__":
    sys.exit(main())
