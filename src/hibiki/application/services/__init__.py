"""Application services."""

from hibiki.application.services.auto_reply import AutoReplyService, compile_pattern
from hibiki.application.services.context_cache import ContextCache
from hibiki.application.services.effect_dispatcher import ToolEffectDispatcher
from hibiki.application.services.stream_renderer import (
    PLACEHOLDER,
    RenderResult,
    SnapshotSink,
    StreamRenderer,
    StreamState,
)

__all__ = [
    "AutoReplyService",
    "ContextCache",
    "PLACEHOLDER",
    "RenderResult",
    "SnapshotSink",
    "StreamRenderer",
    "StreamState",
    "ToolEffectDispatcher",
    "compile_pattern",
]
