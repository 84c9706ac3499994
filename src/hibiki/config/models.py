"""設定データクラス"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class SlackConfig:
    """Slack接続設定"""

    bot_token: str
    app_token: str


@dataclass
class LLMConfig:
    """LLM設定（LiteLLMのcompletionに渡すdict）"""

    model: str
    temperature: float = 0.7
    max_tokens: int = 1000


@dataclass
class AgentConfig:
    """strands-agents の LiteLLMModel 設定

    Attributes:
        model_id: LiteLLM のモデル ID（例: "openrouter/openai/gpt-4o-mini"）
        params: モデルパラメータ（temperature, max_tokens など）
        client_args: LiteLLM クライアント引数（api_key, api_base など）
    """

    model_id: str
    params: dict[str, Any] | None = None
    client_args: dict[str, Any] | None = None


@dataclass
class PersonaConfig:
    """ペルソナ設定"""

    name: str
    system_prompt: str


@dataclass
class MemoryConfig:
    """永続化設定"""

    database_path: str


@dataclass
class ContextConfig:
    """会話コンテキスト設定

    Attributes:
        max_message_window: チャットごとに保持するメッセージ数の上限
    """

    max_message_window: int = 50


@dataclass
class ResponseConfig:
    """応答設定

    Attributes:
        show_reasoning: 推論テキストを引用ブロックとして表示するか
        chat_allow_list: 応答を許可するチャット ID（None なら全チャット）
        question_keywords: メンションなしで質問判定を行うキーワード
        question_probability: 質問判定を行う確率（0.0-1.0）
        rule_cache_ttl_seconds: 自動返信ルールのキャッシュ有効期間
    """

    show_reasoning: bool = False
    chat_allow_list: list[str] | None = None
    question_keywords: list[str] = field(default_factory=lambda: ["?", "？"])
    question_probability: float = 0.5
    rule_cache_ttl_seconds: float = 60.0


@dataclass
class UsageConfig:
    """API 使用量照会設定（OpenRouter）"""

    api_key: str
    endpoint: str = "https://openrouter.ai/api/v1/auth/key"


@dataclass
class LoggingConfig:
    """ログ設定"""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    loggers: dict[str, str] | None = None
    debug_llm_messages: bool = False


@dataclass
class Config:
    """アプリケーション設定"""

    slack: SlackConfig
    agent: AgentConfig
    llm: dict[str, LLMConfig]
    persona: PersonaConfig
    memory: MemoryConfig
    context: ContextConfig = field(default_factory=ContextConfig)
    response: ResponseConfig = field(default_factory=ResponseConfig)
    usage: UsageConfig | None = None
    logging: LoggingConfig | None = None
