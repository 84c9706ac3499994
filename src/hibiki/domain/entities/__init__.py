"""Domain entities."""

from hibiki.domain.entities.auto_reply_rule import (
    AutoReplyMatch,
    AutoReplyRule,
    RuleDiagnostic,
    RuleEvaluation,
    RuleListing,
    create_auto_reply_rule,
)
from hibiki.domain.entities.cached_message import CachedMessage
from hibiki.domain.entities.deferred_reply import DeferredReply
from hibiki.domain.entities.effect import (
    AutoReplyPayload,
    EffectOutcome,
    RememberPayload,
    ReplyAfterPayload,
    parse_effect_payload,
)
from hibiki.domain.entities.generation import ChatTurn, GenerationRequest
from hibiki.domain.entities.key_usage import KeyUsage
from hibiki.domain.entities.memory_note import MemoryNote
from hibiki.domain.entities.message import Message, MessageOrigin
from hibiki.domain.entities.stream_event import (
    Abort,
    ReasoningDelta,
    StreamEvent,
    TextDelta,
    ToolCall,
    ToolInputDelta,
    ToolInputEnd,
    ToolInputStart,
)
from hibiki.domain.entities.user import User

__all__ = [
    "Abort",
    "AutoReplyMatch",
    "AutoReplyPayload",
    "AutoReplyRule",
    "CachedMessage",
    "ChatTurn",
    "DeferredReply",
    "EffectOutcome",
    "GenerationRequest",
    "KeyUsage",
    "MemoryNote",
    "Message",
    "MessageOrigin",
    "ReasoningDelta",
    "RememberPayload",
    "ReplyAfterPayload",
    "RuleDiagnostic",
    "RuleEvaluation",
    "RuleListing",
    "StreamEvent",
    "TextDelta",
    "ToolCall",
    "ToolInputDelta",
    "ToolInputEnd",
    "ToolInputStart",
    "User",
    "create_auto_reply_rule",
    "parse_effect_payload",
]
