"""Domain service protocols."""

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Protocol

from hibiki.domain.entities import (
    CachedMessage,
    ChatTurn,
    GenerationRequest,
    MemoryNote,
    StreamEvent,
)


class MessagingService(Protocol):
    """Messaging abstraction (platform-independent).

    This protocol defines the interface for sending and editing messages
    on any messaging platform (Slack, Discord, etc.).
    """

    async def send_message(
        self,
        chat_id: str,
        text: str,
        reply_to: str | None = None,
    ) -> str:
        """Send a message to a chat.

        Args:
            chat_id: Target chat ID.
            text: Message content (platform markup).
            reply_to: Message ID to reply to.

        Returns:
            ID of the sent message.

        Raises:
            TransportError: If the platform rejects the call.
        """
        ...

    async def edit_message(self, chat_id: str, message_id: str, text: str) -> None:
        """Replace the content of a previously sent message.

        Raises:
            TransportError: If the platform rejects the call.
        """
        ...


class ResponseStreamer(Protocol):
    """Streaming response generation abstraction."""

    def stream(self, request: GenerationRequest) -> AsyncIterator[StreamEvent]:
        """Start a generation and yield its delta events in order.

        Args:
            request: System prompt, role-tagged turns and trigger message.

        Returns:
            Async iterator of stream events.

        Raises:
            GenerationError: If the call or the stream fails.
        """
        ...


class QuestionJudgment(Protocol):
    """Decides whether an unaddressed message asks for help."""

    async def is_question(self, text: str) -> bool:
        """Judge a message.

        Args:
            text: Message text.

        Returns:
            True if the bot should answer.
        """
        ...


class ScheduledHandle(Protocol):
    """Opaque handle for a registered callback."""

    @property
    def id(self) -> str:
        """Unique handle ID."""
        ...


ScheduledCallback = Callable[[], Awaitable[None]]


class Scheduler(Protocol):
    """Delayed one-shot callback registration."""

    def register(self, delay_ms: float, callback: ScheduledCallback) -> ScheduledHandle:
        """Run ``callback`` once after ``delay_ms`` milliseconds.

        Returns:
            Handle usable with cancel().
        """
        ...

    def cancel(self, handle: ScheduledHandle) -> bool:
        """Cancel a pending callback.

        Returns:
            True if the callback was pending and is now cancelled.
        """
        ...


class PromptBuilder(Protocol):
    """Builds generation inputs from chat state."""

    def build_system_prompt(
        self,
        prompt: str,
        bot_name: str,
        memories: list[MemoryNote],
    ) -> str:
        """Render the system prompt."""
        ...

    def build_turns(self, messages: list[CachedMessage]) -> list[ChatTurn]:
        """Convert cached messages to role-tagged turns, oldest first."""
        ...
