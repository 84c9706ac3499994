"""設定管理モジュール"""

from hibiki.config.loader import (
    ConfigError,
    ConfigValidationError,
    EnvironmentVariableError,
    expand_env_vars,
    load_config,
)
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

__all__ = [
    "AgentConfig",
    "Config",
    "ConfigError",
    "ConfigValidationError",
    "ContextConfig",
    "EnvironmentVariableError",
    "LLMConfig",
    "LoggingConfig",
    "MemoryConfig",
    "PersonaConfig",
    "ResponseConfig",
    "SlackConfig",
    "UsageConfig",
    "expand_env_vars",
    "load_config",
]
