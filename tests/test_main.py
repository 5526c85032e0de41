"""
Tests for the process shell in main.py: how serving ends and which exit code
each ending produces.
"""

import asyncio
import os
import signal
import subprocess
import sys
import time
from pathlib import Path
from unittest.mock import patch

import pytest

from core.config import Settings
from core.registry import build_registry
from main import ProcessShell, main

PROJECT_ROOT = Path(__file__).resolve().parent.parent
READY_LINE = "Serving MCP over stdio"


class HangingServer:
    """Stands in for FastMCP; serves until cancelled or told to finish."""

    def __init__(self, error=None):
        self.started = asyncio.Event()
        self.finish = asyncio.Event()
        self.error = error
        self.cancelled = False
        self.run_kwargs = None

    async def run_async(self, **kwargs):
        self.run_kwargs = kwargs
        self.started.set()
        try:
            await self.finish.wait()
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self.error is not None:
            raise self.error


def _explode():
    raise RuntimeError("background callback failed")


class TestProcessShell:

    @pytest.mark.asyncio
    async def test_shutdown_request_returns_zero(self):
        shell = ProcessShell()
        server = HangingServer()

        serving = asyncio.ensure_future(shell.serve(server))
        await server.started.wait()
        shell.request_shutdown("SIGTERM")

        assert await asyncio.wait_for(serving, timeout=5) == 0
        assert shell.stopped
        await asyncio.sleep(0)
        assert server.cancelled

    @pytest.mark.asyncio
    async def test_loop_exception_returns_one(self):
        shell = ProcessShell()
        server = HangingServer()

        serving = asyncio.ensure_future(shell.serve(server))
        await server.started.wait()
        asyncio.get_running_loop().call_soon(_explode)

        assert await asyncio.wait_for(serving, timeout=5) == 1
        assert shell.stopped

    @pytest.mark.asyncio
    async def test_handle_loop_exception_directly(self):
        shell = ProcessShell()
        server = HangingServer()

        serving = asyncio.ensure_future(shell.serve(server))
        await server.started.wait()
        shell.handle_loop_exception(
            asyncio.get_running_loop(),
            {"message": "Task exception was never retrieved", "exception": ValueError("bad")},
        )

        assert await asyncio.wait_for(serving, timeout=5) == 1

    @pytest.mark.asyncio
    async def test_transport_end_returns_zero(self):
        shell = ProcessShell()
        server = HangingServer()

        serving = asyncio.ensure_future(shell.serve(server))
        await server.started.wait()
        server.finish.set()

        assert await asyncio.wait_for(serving, timeout=5) == 0
        assert not shell.stopped
        assert server.run_kwargs == {"transport": "stdio", "show_banner": False}

    @pytest.mark.asyncio
    async def test_transport_failure_propagates(self):
        shell = ProcessShell()
        server = HangingServer(error=OSError("stdout closed"))

        serving = asyncio.ensure_future(shell.serve(server))
        await server.started.wait()
        server.finish.set()

        with pytest.raises(OSError, match="stdout closed"):
            await asyncio.wait_for(serving, timeout=5)


class TestMain:

    def test_startup_failure_returns_one(self):
        with patch("main.build_server", side_effect=RuntimeError("no registry")):
            assert main() == 1

    def test_returns_exit_code_from_run(self):
        built = (object(), Settings(), build_registry())

        with patch("main.build_server", return_value=built), patch("main.run", return_value=0) as run:
            assert main() == 0

        shell, server = run.call_args.args
        assert isinstance(shell, ProcessShell)
        assert server is built[0]


def _wait_for_line(stream, text, timeout=30):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        line = stream.readline()
        if not line:
            return False
        if text in line:
            return True
    return False


@pytest.fixture
def server_process():
    env = dict(os.environ, MCP_LOG_LEVEL="INFO")
    env.pop("GEMINI_API_KEY", None)
    process = subprocess.Popen(
        [sys.executable, "main.py"],
        cwd=PROJECT_ROOT,
        env=env,
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )
    yield process
    if process.poll() is None:
        process.kill()
        process.wait()
    for stream in (process.stdin, process.stdout, process.stderr):
        stream.close()


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals only")
class TestServerProcess:

    def test_sigterm_with_open_stdin_exits_zero(self, server_process):
        assert _wait_for_line(server_process.stderr, READY_LINE)

        server_process.send_signal(signal.SIGTERM)

        assert server_process.wait(timeout=10) == 0

    def test_sigint_with_open_stdin_exits_zero(self, server_process):
        assert _wait_for_line(server_process.stderr, READY_LINE)

        server_process.send_signal(signal.SIGINT)

        assert server_process.wait(timeout=10) == 0

    def test_closing_stdin_exits_zero(self, server_process):
        assert _wait_for_line(server_process.stderr, READY_LINE)

        server_process.stdin.close()

        assert server_process.wait(timeout=20) == 0
