"""Per-chat sliding window of recent messages."""

import logging
from collections import deque

from hibiki.domain.entities import CachedMessage, Message

logger = logging.getLogger(__name__)


class ContextCache:
    """Bounded, ordered buffer of recent messages for each chat.

    Each chat keeps at most its effective window of messages. The effective
    window is the per-chat override when one is set, clamped to the
    process-wide maximum. Eviction is strict FIFO.
    """

    def __init__(self, max_window: int) -> None:
        """Initialize the cache.

        Args:
            max_window: Process-wide maximum number of messages per chat.

        Raises:
            ValueError: If max_window is not positive.
        """
        if max_window < 1:
            raise ValueError("max_window must be at least 1")
        self._max_window = max_window
        self._overrides: dict[str, int] = {}
        self._buffers: dict[str, deque[CachedMessage]] = {}

    @property
    def max_window(self) -> int:
        """Process-wide maximum window."""
        return self._max_window

    def effective_window(self, chat_id: str) -> int:
        """Window applied to a chat after clamping its override."""
        override = self._overrides.get(chat_id)
        if override is None:
            return self._max_window
        return min(override, self._max_window)

    def add_message(self, chat_id: str, message: Message) -> bool:
        """Append a message to a chat's buffer.

        Messages without text or without an identified sender are ignored.

        Args:
            chat_id: Chat ID.
            message: Message to cache.

        Returns:
            True if the message was cached.
        """
        if message.user is None or not message.text:
            return False

        buffer = self._buffers.get(chat_id)
        if buffer is None:
            buffer = deque(maxlen=self.effective_window(chat_id))
            self._buffers[chat_id] = buffer
        buffer.append(CachedMessage.from_message(message))
        return True

    def get_messages(self, chat_id: str, window: int | None = None) -> list[CachedMessage]:
        """Get the most recent messages of a chat, oldest first.

        Args:
            chat_id: Chat ID.
            window: Number of messages to return. Never exceeds the chat's
                effective window; None returns the whole buffer.

        Returns:
            Cached messages in chronological order.
        """
        buffer = self._buffers.get(chat_id)
        if not buffer:
            return []
        limit = self.effective_window(chat_id)
        if window is not None:
            limit = min(window, limit)
        if limit <= 0:
            return []
        messages = list(buffer)
        return messages[-limit:]

    def set_chat_window(self, chat_id: str, window: int | None) -> None:
        """Set or clear a per-chat window override.

        The override is clamped to the process-wide maximum. Shrinking the
        window discards the oldest entries.

        Args:
            chat_id: Chat ID.
            window: New window, or None to use the process-wide maximum.
        """
        if window is None:
            self._overrides.pop(chat_id, None)
        elif window < 1:
            raise ValueError("window must be at least 1")
        else:
            self._overrides[chat_id] = window

        self._resize(chat_id, self.effective_window(chat_id))

    def set_max_window(self, max_window: int) -> None:
        """Change the process-wide maximum.

        Every chat's buffer is shrunk to at most the new maximum, keeping the
        most recent entries.

        Args:
            max_window: New maximum.
        """
        if max_window < 1:
            raise ValueError("max_window must be at least 1")
        logger.info("Changing max message window: %d -> %d", self._max_window, max_window)
        self._max_window = max_window
        for chat_id in list(self._buffers):
            self._resize(chat_id, self.effective_window(chat_id))

    def clear_chat(self, chat_id: str) -> None:
        """Drop a chat's buffer."""
        self._buffers.pop(chat_id, None)

    def clear_all(self) -> None:
        """Drop every buffer."""
        self._buffers.clear()

    def _resize(self, chat_id: str, window: int) -> None:
        """Rebuild a buffer with a new bound, keeping the newest entries."""
        buffer = self._buffers.get(chat_id)
        if buffer is None or buffer.maxlen == window:
            return
        # deque(iterable, maxlen) keeps the rightmost items
        self._buffers[chat_id] = deque(buffer, maxlen=window)
