"""Classification of errors raised while streaming through strands."""

from hibiki.infrastructure.llm.client import TRANSLATED_ERRORS, translate_error
from hibiki.infrastructure.llm.exceptions import (
    LLMAuthenticationError,
    LLMError,
    LLMModelNotFoundError,
    LLMRateLimitError,
    LLMTimeoutError,
)

_MESSAGE_KEYWORDS: tuple[tuple[type[LLMError], tuple[str, ...]], ...] = (
    (LLMAuthenticationError, ("authentication", "api key", "unauthorized")),
    (LLMRateLimitError, ("rate limit", "too many requests", "throttl")),
    (LLMTimeoutError, ("timeout", "timed out")),
    (LLMModelNotFoundError, ("model not found", "invalid model", "does not exist")),
)


def _litellm_cause(e: BaseException) -> Exception | None:
    """例外の原因チェーンから litellm の例外を探す"""
    current: BaseException | None = e
    while current is not None:
        if isinstance(current, TRANSLATED_ERRORS):
            return current
        current = current.__cause__
    return None


def map_strands_exception(e: Exception) -> LLMError:
    """strands の例外を LLMError に変換する

    strands はプロバイダの例外をそのまま、または別の例外に包んで送出する。
    原因をたどって litellm の例外があればその種類で、無ければメッセージで分類する。
    """
    if isinstance(e, LLMError):
        return e

    cause = _litellm_cause(e)
    if cause is not None:
        return translate_error(cause)

    message = str(e) or type(e).__name__
    lowered = message.lower()
    for error_class, keywords in _MESSAGE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return error_class(message)
    return LLMError(message)
