"""strands-agents integration."""

from hibiki.infrastructure.llm.strands.effect_tools import (
    EFFECT_DISPATCHER_KEY,
    EFFECT_TOOLS,
    TRIGGER_MESSAGE_KEY,
    EffectToolsFactory,
)
from hibiki.infrastructure.llm.strands.exceptions import map_strands_exception
from hibiki.infrastructure.llm.strands.factory import StrandsModelProvider
from hibiki.infrastructure.llm.strands.response_streamer import (
    StrandsEventMapper,
    StrandsResponseStreamer,
)

__all__ = [
    "EFFECT_DISPATCHER_KEY",
    "EFFECT_TOOLS",
    "EffectToolsFactory",
    "StrandsEventMapper",
    "StrandsModelProvider",
    "StrandsResponseStreamer",
    "TRIGGER_MESSAGE_KEY",
    "map_strands_exception",
]
