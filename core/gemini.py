# =============================================================================
# core/gemini.py  —  The external text-generation collaborator
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Wraps the Google Gen AI SDK behind one operation:
#
#       await generator.generate(prompt_text) -> text
#
#   Handlers depend on the TextGenerator protocol, not on the SDK, so tests
#   swap in a fake generator and never touch the network.
#
# FAILURE MODES:
#   - Blank API key            → ValueError at construction
#   - Transport / auth failure → ToolFailure (InternalError) from generate()
#   - Empty reply              → returned as-is; the handler decides what
#                                an empty reply means for its tool
#
# No retries and no timeout: one attempt, and whatever happens surfaces.
# =============================================================================

import logging
from typing import Iterable, Protocol

from google import genai
from google.genai import errors as genai_errors

from core.config import DEFAULT_GEMINI_MODEL
from core.errors import ToolFailure, internal_error

logger = logging.getLogger(__name__)

CONNECTIVITY_PROMPT = "Explain how AI works in a few words"

_REVIEW_PREAMBLE = (
    "You will be provided a list of chat messages that were sent as part of a "
    "conversation with an LLM. Your role is to be a mentor and provide feedback "
    "to the LLM user so that they learn ways to improve their prompts in the "
    "future. The goal is to educate the user about what makes an effective "
    "prompt, as well as point out mistakes being made in the given prompts. "
    "The prompts given by the user are as follows:"
)

_REVIEW_CLOSING = (
    "Please provide constructive feedback, highlighting both strengths and "
    "areas for improvement in these prompts."
)


class TextGenerator(Protocol):
    """Anything that can turn a prompt into generated text."""

    async def generate(self, prompt: str) -> str | None:
        ...


def build_review_prompt(prompts: Iterable[str]) -> str:
    """Embed the user's prompts, numbered from 1, in the mentoring instructions.

    Args:
        prompts: The prompts to review, in conversation order.

    Returns:
        A single prompt string ready to send to the model.
    """
    numbered = "\n\n".join(f"{index}. {prompt}" for index, prompt in enumerate(prompts, start=1))
    return f"{_REVIEW_PREAMBLE}\n\n{numbered}\n\n{_REVIEW_CLOSING}"


class GeminiGenerator:
    """TextGenerator backed by the Gemini API."""

    def __init__(self, api_key: str, model: str = DEFAULT_GEMINI_MODEL, client: genai.Client | None = None):
        if not isinstance(api_key, str) or not api_key.strip():
            raise ValueError("GEMINI_API_KEY is required and must be a non-empty string")
        self.model = model
        self._client = client or genai.Client(api_key=api_key.strip())

    async def generate(self, prompt: str) -> str | None:
        """Send one prompt and return the reply text (None if the model sent none)."""
        logger.debug("Sending %d-character prompt to %s", len(prompt), self.model)
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
            )
        except genai_errors.APIError as e:
            raise ToolFailure(internal_error(f"Gemini API request failed: {e}")) from e
        return response.text


def create_gemini_generator(api_key: str, model: str = DEFAULT_GEMINI_MODEL) -> TextGenerator:
    """Default generator factory used by the server context."""
    return GeminiGenerator(api_key, model=model)
