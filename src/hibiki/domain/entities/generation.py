"""Generation request entities."""

from dataclasses import dataclass
from typing import Literal

from hibiki.domain.entities.message import Message


@dataclass(frozen=True)
class ChatTurn:
    """A role-tagged conversation turn handed to the generation service."""

    role: Literal["user", "assistant"]
    content: str


@dataclass(frozen=True)
class GenerationRequest:
    """Everything the generation service needs for one response.

    Attributes:
        system_prompt: Rendered system prompt.
        turns: Conversation history, oldest first. The last turn is the one
            to respond to.
        trigger: The incoming message that triggered generation.
        model_id: Per-chat model override (None uses the default model).
    """

    system_prompt: str
    turns: list[ChatTurn]
    trigger: Message
    model_id: str | None = None
