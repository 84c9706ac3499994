"""Tests for LLMClient."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from litellm.exceptions import AuthenticationError, RateLimitError, Timeout

from hibiki.config import LLMConfig
from hibiki.domain.exceptions import GenerationError
from hibiki.infrastructure.llm import (
    LLMAuthenticationError,
    LLMClient,
    LLMError,
    LLMRateLimitError,
    LLMTimeoutError,
)


def completion_response(content: str | None) -> MagicMock:
    """Create mock LiteLLM response."""
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


class TestLLMClient:
    """LLMClient tests."""

    @pytest.fixture
    def client(self, llm_config: LLMConfig) -> LLMClient:
        """Create LLMClient instance."""
        return LLMClient(config=llm_config)

    async def test_complete_success(self, client: LLMClient) -> None:
        """Test successful completion."""
        with patch(
            "litellm.acompletion",
            new_callable=AsyncMock,
            return_value=completion_response("yes"),
        ) as mock_completion:
            result = await client.complete([{"role": "user", "content": "Hello"}])

        assert result == "yes"
        call_kwargs = mock_completion.call_args.kwargs
        assert call_kwargs["model"] == "gpt-4o-mini"
        assert call_kwargs["temperature"] == 0.7
        assert call_kwargs["max_tokens"] == 1000

    async def test_kwargs_override(self, client: LLMClient) -> None:
        """Test that kwargs can override config."""
        with patch(
            "litellm.acompletion",
            new_callable=AsyncMock,
            return_value=completion_response("x"),
        ) as mock_completion:
            await client.complete([], max_tokens=5)

        assert mock_completion.call_args.kwargs["max_tokens"] == 5

    async def test_empty_content(self, client: LLMClient) -> None:
        """Test that None content becomes an empty string."""
        with patch(
            "litellm.acompletion",
            new_callable=AsyncMock,
            return_value=completion_response(None),
        ):
            assert await client.complete([]) == ""

    async def test_authentication_error(self, client: LLMClient) -> None:
        """Test that authentication errors are converted."""
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.side_effect = AuthenticationError(
                message="Invalid API key",
                llm_provider="openai",
                model="gpt-4o-mini",
            )
            with pytest.raises(LLMAuthenticationError):
                await client.complete([])

    async def test_rate_limit_error(self, client: LLMClient) -> None:
        """Test that rate limit errors are converted."""
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.side_effect = RateLimitError(
                message="Rate limit exceeded",
                llm_provider="openai",
                model="gpt-4o-mini",
            )
            with pytest.raises(LLMRateLimitError):
                await client.complete([])

    async def test_generic_error(self, client: LLMClient) -> None:
        """Test that other errors become LLMError (a GenerationError)."""
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.side_effect = RuntimeError("boom")
            with pytest.raises(LLMError) as exc_info:
                await client.complete([])
        assert isinstance(exc_info.value, GenerationError)

    async def test_timeout_error(self, client: LLMClient) -> None:
        """Test that timeouts are converted."""
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_completion:
            mock_completion.side_effect = Timeout(
                message="Request timed out",
                model="gpt-4o-mini",
                llm_provider="openai",
            )
            with pytest.raises(LLMTimeoutError):
                await client.complete([])
