"""Typed delta events produced by a streaming generation."""

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class ReasoningDelta:
    """A fragment of model reasoning text."""

    text: str


@dataclass(frozen=True)
class TextDelta:
    """A fragment of answer text."""

    text: str


@dataclass(frozen=True)
class ToolInputStart:
    """The model started writing arguments for a tool call."""

    tool_name: str


@dataclass(frozen=True)
class ToolInputDelta:
    """A raw argument fragment for the currently active tool."""

    fragment: str


@dataclass(frozen=True)
class ToolInputEnd:
    """The active tool's arguments are complete."""


@dataclass(frozen=True)
class ToolCall:
    """A complete tool invocation."""

    tool_name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    call_id: str = ""


@dataclass(frozen=True)
class Abort:
    """Cooperative cancellation signal; no further events are consumed."""


StreamEvent = Union[
    ReasoningDelta,
    TextDelta,
    ToolInputStart,
    ToolInputDelta,
    ToolInputEnd,
    ToolCall,
    Abort,
]
