"""Common fixtures for LLM infrastructure tests."""

import pytest

from hibiki.config import LLMConfig


@pytest.fixture
def llm_config() -> LLMConfig:
    """Create LLM config."""
    return LLMConfig(model="gpt-4o-mini", temperature=0.7, max_tokens=1000)
