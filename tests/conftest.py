"""Shared fixtures for the OpenAgent test suite."""

from typing import Callable

import httpx
import pytest

from openagent.core.api import OpenRouterContentGenerator
from openagent.core.config import ContentGeneratorConfig


@pytest.fixture
def generator_config() -> ContentGeneratorConfig:
    return ContentGeneratorConfig(
        api_key="sk-or-v1-test",
        base_url="https://openrouter.test/api/v1",
        headers={"User-Agent": "openagent-tests"},
    )


@pytest.fixture
def make_generator(generator_config) -> Callable[..., OpenRouterContentGenerator]:
    """Build a generator whose HTTP traffic goes to ``handler``."""

    def factory(handler) -> OpenRouterContentGenerator:
        return OpenRouterContentGenerator(generator_config, transport=httpx.MockTransport(handler))

    return factory
