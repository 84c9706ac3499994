"""Domain services."""

from hibiki.domain.services.exec_blocks import extract_exec_blocks
from hibiki.domain.services.protocols import (
    MessagingService,
    PromptBuilder,
    QuestionJudgment,
    ResponseStreamer,
    ScheduledCallback,
    ScheduledHandle,
    Scheduler,
)
from hibiki.domain.services.template import (
    SENDER_PLACEHOLDER,
    substitute_captures,
    substitute_sender,
)

__all__ = [
    "MessagingService",
    "PromptBuilder",
    "QuestionJudgment",
    "ResponseStreamer",
    "SENDER_PLACEHOLDER",
    "ScheduledCallback",
    "ScheduledHandle",
    "Scheduler",
    "extract_exec_blocks",
    "substitute_captures",
    "substitute_sender",
]
