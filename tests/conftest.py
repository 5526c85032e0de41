"""
Shared fixtures: a fake text generator, server contexts with and without an
API key, the default registry and a dispatcher wired to them.
"""

import pytest

from core.config import Settings
from core.context import ServerContext
from core.dispatcher import Dispatcher
from core.registry import build_registry


class FakeGenerator:
    """Stands in for the Gemini client; records every prompt it receives."""

    def __init__(self, reply="Prompts look good.", error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def fake_generator():
    return FakeGenerator()


@pytest.fixture
def registry():
    return build_registry()


@pytest.fixture
def factory_calls():
    return []


@pytest.fixture
def context(registry, fake_generator, factory_calls):
    def factory(api_key, model):
        factory_calls.append((api_key, model))
        return fake_generator

    return ServerContext(
        settings=Settings(gemini_api_key="test-key"),
        generator_factory=factory,
        tool_names=registry.names(),
    )


@pytest.fixture
def context_without_key(registry, fake_generator):
    return ServerContext(
        settings=Settings(gemini_api_key=None),
        generator_factory=lambda api_key, model: fake_generator,
        tool_names=registry.names(),
    )


@pytest.fixture
def dispatcher(registry, context):
    return Dispatcher(registry, context)
