"""Message entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from hibiki.domain.entities.user import User


class MessageOrigin(Enum):
    """Who produced a message."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """Message entity.

    Attributes:
        id: Platform-specific message ID (Slack ts).
        chat_id: Chat (channel) where the message was posted.
        user: User who sent the message. None for system messages.
        text: Message content.
        timestamp: When the message was sent.
        origin: Whether a human or the bot produced the message.
        thread_ts: Parent message timestamp (if in a thread).
        parent_user_id: Author of the thread parent (if in a thread).
        mentions: List of user IDs mentioned in the message.
        has_attachments: Whether files or media were attached.
    """

    id: str
    chat_id: str
    user: User | None
    text: str
    timestamp: datetime
    origin: MessageOrigin = MessageOrigin.USER
    thread_ts: str | None = None
    parent_user_id: str | None = None
    mentions: list[str] = field(default_factory=list)
    has_attachments: bool = False

    def is_in_thread(self) -> bool:
        """Check if this message is in a thread.

        Returns:
            True if the message is a thread reply.
        """
        return self.thread_ts is not None and self.thread_ts != self.id

    def mentions_user(self, user_id: str) -> bool:
        """Check if a user is mentioned in this message.

        Args:
            user_id: The user ID to check.

        Returns:
            True if the user is mentioned.
        """
        return user_id in self.mentions

    def is_reply_to(self, user_id: str) -> bool:
        """Check if this message replies to a thread started by a user."""
        return self.is_in_thread() and self.parent_user_id == user_id

    @property
    def reply_anchor(self) -> str:
        """Message ID that replies to this message should be attached to."""
        return self.thread_ts or self.id
