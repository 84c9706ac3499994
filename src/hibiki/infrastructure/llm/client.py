"""LiteLLM completion client for short classification prompts."""

import logging
from typing import Any

import litellm
from litellm.exceptions import (
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    Timeout,
)

from hibiki.config import LLMConfig
from hibiki.infrastructure.llm.exceptions import (
    LLMAuthenticationError,
    LLMError,
    LLMModelNotFoundError,
    LLMRateLimitError,
    LLMTimeoutError,
)

logger = logging.getLogger(__name__)

# litellm の例外と変換先。上から順に判定する
_ERROR_TRANSLATIONS: tuple[tuple[type[Exception], type[LLMError], int], ...] = (
    (AuthenticationError, LLMAuthenticationError, logging.ERROR),
    (RateLimitError, LLMRateLimitError, logging.WARNING),
    (Timeout, LLMTimeoutError, logging.WARNING),
    (NotFoundError, LLMModelNotFoundError, logging.ERROR),
)
TRANSLATED_ERRORS = tuple(source for source, _, _ in _ERROR_TRANSLATIONS)


def translate_error(e: Exception) -> LLMError:
    """litellm の例外を LLMError に変換する"""
    for source, target, level in _ERROR_TRANSLATIONS:
        if isinstance(e, source):
            logger.log(level, "%s from %s: %s", target.__name__, type(e).__name__, e)
            return target(str(e))
    logger.error("LLM error: %s", e)
    return LLMError(str(e))


class LLMClient:
    """非ストリーミングの litellm 呼び出し

    質問判定のような、短い応答だけが欲しい呼び出しに使う。
    LLMConfig の model / temperature / max_tokens を既定値として渡す。
    """

    def __init__(self, config: LLMConfig) -> None:
        self._config = config

    @property
    def model(self) -> str:
        return self._config.model

    async def complete(self, messages: list[dict[str, str]], **overrides: Any) -> str:
        """チャット補完を実行する

        Args:
            messages: OpenAI 形式のメッセージ列
            **overrides: 設定値を上書きするパラメータ

        Returns:
            生成テキスト。content が無い場合は空文字

        Raises:
            LLMError: 呼び出しに失敗した場合（種類ごとのサブクラス）
        """
        params: dict[str, Any] = {
            "model": self._config.model,
            "temperature": self._config.temperature,
            "max_tokens": self._config.max_tokens,
        }
        params.update(overrides)

        logger.debug("LLM request: model=%s, %d message(s)", params["model"], len(messages))
        try:
            response = await litellm.acompletion(messages=messages, **params)
        except Exception as e:
            raise translate_error(e) from e

        return response.choices[0].message.content or ""
