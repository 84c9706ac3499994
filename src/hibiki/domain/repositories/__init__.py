"""Domain repositories."""

from hibiki.domain.repositories.auto_reply_rule_repository import (
    AutoReplyRuleRepository,
)
from hibiki.domain.repositories.chat_setting_repository import ChatSettingRepository
from hibiki.domain.repositories.memory_repository import MemoryRepository
from hibiki.domain.repositories.prompt_repository import PromptRepository

__all__ = [
    "AutoReplyRuleRepository",
    "ChatSettingRepository",
    "MemoryRepository",
    "PromptRepository",
]
