# =============================================================================
# core/handlers.py  —  One function per tool
# =============================================================================
#
# Every handler has the same shape:
#
#     async def handler(arguments, context) -> str | ToolError
#
#   - `arguments` is the TYPED object produced by core/validation.py
#   - `context`   is the ServerContext built once at startup
#   - a plain string is the tool's text reply
#   - a ToolError is a domain failure (missing key, empty model reply, ...)
#
# Handlers never build the response envelope; the dispatcher does that.
# The Gemini API key is read from the context and is never logged.
# =============================================================================

import json
import logging
import platform
import time

from core.context import ServerContext
from core.errors import internal_error, invalid_params
from core.gemini import CONNECTIVITY_PROMPT, build_review_prompt
from core.models import ToolError
from core.validation import HelloArguments, NoArguments, ReviewArguments

logger = logging.getLogger(__name__)

BASE_GREETING = "Hello from your friendly MCP server!"

_MISSING_KEY_MESSAGE = (
    "GEMINI_API_KEY environment variable is required and must be a non-empty string"
)


# =============================================================================
# say_hello
# =============================================================================
async def say_hello(arguments: HelloArguments, context: ServerContext) -> str:
    """Return the base greeting, personalised when a name was given."""
    message = BASE_GREETING
    if arguments.name:
        message += f" Nice to meet you, {arguments.name}!"

    logger.info("Generated hello message (personalised=%s, length=%d)", bool(arguments.name), len(message))
    return message


# =============================================================================
# get_current_time
# =============================================================================
# Time formatting must never fail a request.  If the clock or strftime
# misbehaves, fall back to a UTC timestamp that sorts lexically.
# =============================================================================
async def get_current_time(arguments: NoArguments, context: ServerContext) -> str:
    try:
        now = context.clock().astimezone()
        tz_label = now.tzname() or now.strftime("UTC%z")
        return f"{now.strftime('%A, %B %d, %Y at %I:%M:%S %p')} {tz_label}"
    except Exception as e:
        logger.warning("Local time formatting failed, using UTC timestamp: %s", e)
        return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


# =============================================================================
# server_info
# =============================================================================
def _format_uptime(seconds: float) -> str:
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours}h {minutes}m {secs}s"


async def server_info(arguments: NoArguments, context: ServerContext) -> str:
    """Identity, capabilities and uptime, serialised as JSON text."""
    uptime = context.uptime_seconds()
    info = {
        "name": context.settings.server_name,
        "version": context.settings.server_version,
        "capabilities": ["tools"],
        "tools": list(context.tool_names),
        "uptime_seconds": round(uptime, 3),
        "uptime": _format_uptime(uptime),
        "python": platform.python_version(),
        "platform": platform.system() or "unknown",
    }
    return json.dumps(info, indent=2)


# =============================================================================
# test_gemini
# =============================================================================
async def test_gemini(arguments: NoArguments, context: ServerContext) -> str | ToolError:
    """Send a tiny prompt to Gemini and return whatever it answers."""
    if not context.settings.has_api_key:
        return invalid_params(_MISSING_KEY_MESSAGE)

    logger.info("Testing Gemini API connectivity using environment key")
    reply = await context.generator().generate(CONNECTIVITY_PROMPT)

    if not reply or not isinstance(reply, str):
        return internal_error("Gemini API did not return a valid response")

    logger.info("Gemini connectivity test completed")
    return reply


# =============================================================================
# review_prompts
# =============================================================================
async def review_prompts(arguments: ReviewArguments, context: ServerContext) -> str | ToolError:
    """Ask Gemini to mentor the user on a batch of prompts."""
    logger.info(
        "Received %d prompts for review (%d characters total)",
        len(arguments.prompts),
        sum(len(prompt) for prompt in arguments.prompts),
    )

    if not context.settings.has_api_key:
        return invalid_params(_MISSING_KEY_MESSAGE)

    logger.info("Starting prompt review using Gemini")
    reply = await context.generator().generate(build_review_prompt(arguments.prompts))

    if not reply or not isinstance(reply, str):
        return internal_error("Gemini API did not return a valid review response")

    logger.info("Prompt review completed (%d characters)", len(reply))
    return reply
