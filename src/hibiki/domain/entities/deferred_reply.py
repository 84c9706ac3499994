"""DeferredReply entity."""

from dataclasses import dataclass

from hibiki.domain.entities.message import Message


@dataclass(frozen=True)
class DeferredReply:
    """Timer-based reply that is delivered once after a delay.

    Not persisted: pending replies are lost on restart.

    Attributes:
        chat_id: Target chat ID.
        trigger: The message that caused the registration.
        delay_ms: Delay before delivery in milliseconds.
        template: Reply template ($username is substituted on delivery).
    """

    chat_id: str
    trigger: Message
    delay_ms: float
    template: str
