"""LLM-related exceptions."""

from hibiki.domain.exceptions import GenerationError


class LLMError(GenerationError):
    """Base exception for LLM-related errors."""


class LLMRateLimitError(LLMError):
    """Rate limit exceeded error."""


class LLMAuthenticationError(LLMError):
    """Authentication error (invalid API key, etc.)."""


class LLMTimeoutError(LLMError):
    """Request timed out."""


class LLMModelNotFoundError(LLMError):
    """Requested model does not exist."""
