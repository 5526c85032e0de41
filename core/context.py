# =============================================================================
# core/context.py  —  The explicit per-process context
# =============================================================================
#
# Everything a handler may need from "the outside world" lives here and is
# passed in explicitly: settings, the process start time, a clock, and a
# factory for the text-generation collaborator.  There is no module-level
# server singleton; tests build a context with fakes and hand it to the
# dispatcher directly.
# =============================================================================

import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from core.config import Settings
from core.gemini import TextGenerator, create_gemini_generator

GeneratorFactory = Callable[[str, str], TextGenerator]


@dataclass(frozen=True)
class ServerContext:
    settings: Settings = field(default_factory=Settings)
    generator_factory: GeneratorFactory = create_gemini_generator
    clock: Callable[[], datetime] = datetime.now
    started_at: float = field(default_factory=time.monotonic)
    tool_names: tuple[str, ...] = ()

    def uptime_seconds(self) -> float:
        return max(0.0, time.monotonic() - self.started_at)

    def generator(self) -> TextGenerator:
        """Build the collaborator for the configured key and model.

        Callers check `settings.has_api_key` first.
        """
        return self.generator_factory(self.settings.gemini_api_key, self.settings.gemini_model)
