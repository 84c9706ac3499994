"""Application handlers."""

from hibiki.application.handlers.command_handler import (
    COMMANDS,
    ChatCommandHandler,
    CommandSpec,
)
from hibiki.application.handlers.message_handler import ChatMessageHandler

__all__ = ["COMMANDS", "ChatCommandHandler", "ChatMessageHandler", "CommandSpec"]
