"""CachedMessage entity."""

from dataclasses import dataclass
from datetime import datetime

from hibiki.domain.entities.message import Message, MessageOrigin


@dataclass(frozen=True)
class CachedMessage:
    """A message retained in a chat's sliding context window.

    Attributes:
        message_id: Platform-specific message ID.
        sender_id: ID of the sender.
        sender_handle: Handle of the sender (may be empty).
        sender_name: Display name of the sender.
        text: Message content.
        timestamp: When the message was sent.
        origin: Whether a human or the bot produced the message.
    """

    message_id: str
    sender_id: str
    sender_handle: str
    sender_name: str
    text: str
    timestamp: datetime
    origin: MessageOrigin = MessageOrigin.USER

    @classmethod
    def from_message(cls, message: Message) -> "CachedMessage":
        """Build a cache entry from a message with a known sender.

        Raises:
            ValueError: If the message has no sender.
        """
        if message.user is None:
            raise ValueError("Cannot cache a message without a sender")
        return cls(
            message_id=message.id,
            sender_id=message.user.id,
            sender_handle=message.user.name,
            sender_name=message.user.display_name or message.user.name,
            text=message.text,
            timestamp=message.timestamp,
            origin=message.origin,
        )
