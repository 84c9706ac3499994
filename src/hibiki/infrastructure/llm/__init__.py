"""LLM infrastructure."""

from hibiki.infrastructure.llm.client import LLMClient
from hibiki.infrastructure.llm.exceptions import (
    LLMAuthenticationError,
    LLMError,
    LLMModelNotFoundError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from hibiki.infrastructure.llm.prompt_builder import JinjaPromptBuilder
from hibiki.infrastructure.llm.question_judgment import LLMQuestionJudgment
from hibiki.infrastructure.llm.templates import (
    create_jinja_env,
    format_timestamp,
    get_template,
)
from hibiki.infrastructure.llm.usage import OpenRouterUsageClient, UsageLookupError

__all__ = [
    "JinjaPromptBuilder",
    "LLMAuthenticationError",
    "LLMClient",
    "LLMError",
    "LLMModelNotFoundError",
    "LLMQuestionJudgment",
    "LLMRateLimitError",
    "LLMTimeoutError",
    "OpenRouterUsageClient",
    "UsageLookupError",
    "create_jinja_env",
    "format_timestamp",
    "get_template",
]
