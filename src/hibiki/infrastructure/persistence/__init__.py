"""Persistence infrastructure."""

from hibiki.infrastructure.persistence.auto_reply_rule_repository import (
    SQLiteAutoReplyRuleRepository,
)
from hibiki.infrastructure.persistence.chat_setting_repository import (
    SQLiteChatSettingRepository,
)
from hibiki.infrastructure.persistence.database import DatabaseManager
from hibiki.infrastructure.persistence.memory_repository import SQLiteMemoryRepository
from hibiki.infrastructure.persistence.models import (
    AutoReplyRuleModel,
    ChatPromptModel,
    ChatSettingModel,
    MemoryNoteModel,
)
from hibiki.infrastructure.persistence.prompt_repository import SQLitePromptRepository

__all__ = [
    "AutoReplyRuleModel",
    "ChatPromptModel",
    "ChatSettingModel",
    "DatabaseManager",
    "MemoryNoteModel",
    "SQLiteAutoReplyRuleRepository",
    "SQLiteChatSettingRepository",
    "SQLiteMemoryRepository",
    "SQLitePromptRepository",
]
