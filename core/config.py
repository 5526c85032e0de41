# =============================================================================
# core/config.py  —  Settings read from the environment
# =============================================================================
#
# main.py calls load_dotenv() first, so values may come from a real
# environment variable OR from a local .env file.  This module only reads
# os.environ; it never touches the filesystem itself.
#
# VARIABLES:
#   GEMINI_API_KEY  → credential for the Gemini API (test_gemini, review_prompts)
#   GEMINI_MODEL    → model name (default: gemini-2.5-flash)
#   MCP_LOG_LEVEL   → stderr log level (default: INFO)
# =============================================================================

import logging
import os
from dataclasses import dataclass
from typing import Mapping

SERVER_NAME = "prompt-mentor-mcp"
SERVER_VERSION = "1.0.0"

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True, repr=False)
class Settings:
    """Process-wide configuration, built once at startup."""

    gemini_api_key: str | None = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    log_level: str = DEFAULT_LOG_LEVEL
    server_name: str = SERVER_NAME
    server_version: str = SERVER_VERSION

    def __repr__(self) -> str:
        # The key itself never appears in logs or tracebacks.
        key_state = "set" if self.has_api_key else "unset"
        return (
            f"Settings(gemini_api_key=<{key_state}>, gemini_model={self.gemini_model!r}, "
            f"log_level={self.log_level!r}, server_name={self.server_name!r}, "
            f"server_version={self.server_version!r})"
        )

    @property
    def has_api_key(self) -> bool:
        return isinstance(self.gemini_api_key, str) and bool(self.gemini_api_key.strip())


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from `environ` (defaults to os.environ).

    Args:
        environ: Mapping to read from.  Tests pass a plain dict.

    Returns:
        A frozen Settings instance.  An unknown log level falls back to INFO.
    """
    if environ is None:
        environ = os.environ

    log_level = environ.get("MCP_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        log_level = DEFAULT_LOG_LEVEL

    return Settings(
        gemini_api_key=environ.get("GEMINI_API_KEY") or None,
        gemini_model=environ.get("GEMINI_MODEL", "").strip() or DEFAULT_GEMINI_MODEL,
        log_level=log_level,
    )
