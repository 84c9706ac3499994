"""Tests for strands exception mapping."""

import pytest
from litellm.exceptions import RateLimitError

from hibiki.infrastructure.llm.exceptions import (
    LLMAuthenticationError,
    LLMError,
    LLMModelNotFoundError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from hibiki.infrastructure.llm.strands.exceptions import map_strands_exception


class TestMapStrandsException:
    """map_strands_exception のテスト"""

    @pytest.mark.parametrize(
        ("message", "expected"),
        [
            ("Authentication failed", LLMAuthenticationError),
            ("Invalid API key provided", LLMAuthenticationError),
            ("Rate limit exceeded", LLMRateLimitError),
            ("429 Too Many Requests", LLMRateLimitError),
            ("Request timed out", LLMTimeoutError),
            ("Model not found: foo", LLMModelNotFoundError),
            ("something else", LLMError),
        ],
    )
    def test_classification(self, message: str, expected: type[LLMError]) -> None:
        assert type(map_strands_exception(RuntimeError(message))) is expected

    def test_llm_error_passes_through(self) -> None:
        error = LLMTimeoutError("x")
        assert map_strands_exception(error) is error

    def test_empty_message_uses_type_name(self) -> None:
        assert str(map_strands_exception(ValueError())) == "ValueError"

    def test_wrapped_litellm_error(self) -> None:
        """包まれた litellm の例外は種類で分類する"""
        cause = RateLimitError(
            message="slow down", llm_provider="openrouter", model="gpt-4o-mini"
        )
        wrapped = RuntimeError("stream failed")
        wrapped.__cause__ = cause

        error = map_strands_exception(wrapped)

        assert isinstance(error, LLMRateLimitError)
