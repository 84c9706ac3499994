"""YAML設定ファイルの読み込みと環境変数展開"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from hibiki.config.models import (
    AgentConfig,
    Config,
    ContextConfig,
    LLMConfig,
    LoggingConfig,
    MemoryConfig,
    PersonaConfig,
    ResponseConfig,
    SlackConfig,
    UsageConfig,
)


class ConfigError(Exception):
    """設定関連の基底例外"""


class ConfigValidationError(ConfigError):
    """設定値のバリデーションエラー"""


class EnvironmentVariableError(ConfigError):
    """環境変数が見つからないエラー"""


# 環境変数パターン: ${VAR_NAME}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


def expand_env_vars(value: str) -> str:
    """文字列中の ${VAR_NAME} を環境変数の値に置換する

    Args:
        value: 置換対象の文字列

    Returns:
        環境変数が展開された文字列

    Raises:
        EnvironmentVariableError: 環境変数が未設定
    """
    if not value:
        return value

    def replace_var(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is None:
            raise EnvironmentVariableError(
                f"Environment variable '{var_name}' is not set"
            )
        return env_value

    return ENV_VAR_PATTERN.sub(replace_var, value)


def _expand_recursive(data: Any) -> Any:
    """データ構造を再帰的に走査し、文字列中の環境変数を展開する"""
    if isinstance(data, dict):
        return {key: _expand_recursive(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_recursive(item) for item in data]
    elif isinstance(data, str):
        return expand_env_vars(data)
    else:
        return data


def _require(data: dict[str, Any], field: str, parent: str = "") -> Any:
    """必須フィールドの値を返す

    Raises:
        ConfigValidationError: フィールドが無い、または null
    """
    if not isinstance(data, dict) or data.get(field) is None:
        full_path = f"{parent}.{field}" if parent else field
        raise ConfigValidationError(f"Required field '{full_path}' is missing")
    return data[field]


def _load_slack(data: dict[str, Any]) -> SlackConfig:
    return SlackConfig(
        bot_token=_require(data, "bot_token", "slack"),
        app_token=_require(data, "app_token", "slack"),
    )


def _load_agent(data: dict[str, Any]) -> AgentConfig:
    return AgentConfig(
        model_id=_require(data, "model_id", "agent"),
        params=data.get("params"),
        client_args=data.get("client_args"),
    )


def _load_llm(data: dict[str, Any]) -> dict[str, LLMConfig]:
    """llm セクションを読み込む。default は必須、judgment などは任意"""
    _require(data, "default", "llm")
    return {
        name: LLMConfig(
            model=_require(item, "model", f"llm.{name}"),
            temperature=item.get("temperature", 0.7),
            max_tokens=item.get("max_tokens", 1000),
        )
        for name, item in data.items()
    }


def _load_persona(data: dict[str, Any]) -> PersonaConfig:
    return PersonaConfig(
        name=_require(data, "name", "persona"),
        system_prompt=_require(data, "system_prompt", "persona"),
    )


def _load_context(data: dict[str, Any] | None) -> ContextConfig:
    if not data:
        return ContextConfig()
    max_window = data.get("max_message_window", ContextConfig().max_message_window)
    if not isinstance(max_window, int) or max_window < 1:
        raise ConfigValidationError(
            "'context.max_message_window' must be a positive integer"
        )
    return ContextConfig(max_message_window=max_window)


def _load_response(data: dict[str, Any] | None) -> ResponseConfig:
    defaults = ResponseConfig()
    if not data:
        return defaults

    probability = float(data.get("question_probability", defaults.question_probability))
    if not 0.0 <= probability <= 1.0:
        raise ConfigValidationError(
            "'response.question_probability' must be between 0.0 and 1.0"
        )

    allow_list = data.get("chat_allow_list")
    return ResponseConfig(
        show_reasoning=bool(data.get("show_reasoning", defaults.show_reasoning)),
        chat_allow_list=[str(x) for x in allow_list] if allow_list else None,
        question_keywords=data.get("question_keywords", defaults.question_keywords),
        question_probability=probability,
        rule_cache_ttl_seconds=float(
            data.get("rule_cache_ttl_seconds", defaults.rule_cache_ttl_seconds)
        ),
    )


def _load_usage(data: dict[str, Any] | None) -> UsageConfig | None:
    """usage セクション（任意）。無ければ /usage は使えない"""
    if not data:
        return None
    return UsageConfig(
        api_key=_require(data, "api_key", "usage"),
        endpoint=data.get("endpoint", UsageConfig.endpoint),
    )


def _load_logging(data: dict[str, Any] | None) -> LoggingConfig | None:
    if not data:
        return None
    defaults = LoggingConfig()
    return LoggingConfig(
        level=data.get("level", defaults.level),
        format=data.get("format", defaults.format),
        loggers=data.get("loggers"),
        debug_llm_messages=data.get("debug_llm_messages", False),
    )


def load_config(path: str | Path) -> Config:
    """設定ファイルを読み込む

    Args:
        path: config.yaml のパス

    Returns:
        Config オブジェクト

    Raises:
        FileNotFoundError: ファイルが存在しない
        ConfigValidationError: 必須項目が欠落、または値が不正
        EnvironmentVariableError: 環境変数が未設定
        yaml.YAMLError: YAML構文エラー
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = _expand_recursive(yaml.safe_load(f) or {})

    return Config(
        slack=_load_slack(_require(data, "slack")),
        agent=_load_agent(_require(data, "agent")),
        llm=_load_llm(_require(data, "llm")),
        persona=_load_persona(_require(data, "persona")),
        memory=MemoryConfig(
            database_path=_require(_require(data, "memory"), "database_path", "memory")
        ),
        context=_load_context(data.get("context")),
        response=_load_response(data.get("response")),
        usage=_load_usage(data.get("usage")),
        logging=_load_logging(data.get("logging")),
    )
