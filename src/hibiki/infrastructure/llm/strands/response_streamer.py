"""StrandsResponseStreamer implementation."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any

from strands import Agent

from hibiki.domain.entities import (
    GenerationRequest,
    ReasoningDelta,
    StreamEvent,
    TextDelta,
    ToolCall,
    ToolInputDelta,
    ToolInputEnd,
    ToolInputStart,
)
from hibiki.infrastructure.llm.strands.exceptions import map_strands_exception
from hibiki.infrastructure.llm.strands.factory import StrandsModelProvider

if TYPE_CHECKING:
    from hibiki.infrastructure.llm.strands.effect_tools import EffectToolsFactory

logger = logging.getLogger(__name__)


class StrandsEventMapper:
    """Translates strands ``stream_async`` events into stream events.

    One mapper is used per generation since it tracks whether a tool-use
    content block is open.
    """

    def __init__(self) -> None:
        self._tool_active = False

    def map(self, event: dict[str, Any]) -> list[StreamEvent]:
        """Map one strands event to zero or more stream events."""
        mapped: list[StreamEvent] = []

        raw = event.get("event")
        if isinstance(raw, dict):
            mapped.extend(self._map_raw(raw))

        if event.get("reasoningText"):
            mapped.append(ReasoningDelta(text=event["reasoningText"]))

        if event.get("data"):
            mapped.append(TextDelta(text=event["data"]))

        message = event.get("message")
        if isinstance(message, dict) and message.get("role") == "assistant":
            for block in message.get("content", []):
                tool_use = block.get("toolUse")
                if tool_use:
                    mapped.append(
                        ToolCall(
                            tool_name=tool_use.get("name", ""),
                            arguments=tool_use.get("input") or {},
                            call_id=tool_use.get("toolUseId", ""),
                        )
                    )

        if event.get("force_stop"):
            # strands は失敗を再送出する直前に force_stop を流すので、例外を待つ
            logger.info("Generation force-stopped: %s", event.get("force_stop_reason"))

        return mapped

    def _map_raw(self, raw: dict[str, Any]) -> list[StreamEvent]:
        if "contentBlockStart" in raw:
            start = raw["contentBlockStart"].get("start", {})
            tool_use = start.get("toolUse")
            if tool_use:
                self._tool_active = True
                return [ToolInputStart(tool_name=tool_use.get("name", ""))]

        if "contentBlockDelta" in raw:
            delta = raw["contentBlockDelta"].get("delta", {})
            tool_use = delta.get("toolUse")
            if tool_use and self._tool_active:
                return [ToolInputDelta(fragment=tool_use.get("input", ""))]

        if "contentBlockStop" in raw and self._tool_active:
            self._tool_active = False
            return [ToolInputEnd()]

        return []


class StrandsResponseStreamer:
    """strands-agents based ResponseStreamer implementation.

    Models are shared through the provider. A new Agent is created for
    each request since the system prompt, history and model override
    depend on the chat.
    """

    def __init__(
        self,
        model_provider: StrandsModelProvider,
        effect_tools_factory: EffectToolsFactory | None = None,
        debug_llm_messages: bool = False,
    ) -> None:
        """Initialize the streamer.

        Args:
            model_provider: Provides the default or per-chat model.
            effect_tools_factory: Factory for effect tools (optional).
            debug_llm_messages: If True, log LLM messages at INFO level.
        """
        self._models = model_provider
        self._effect_tools_factory = effect_tools_factory
        self._debug_llm_messages = debug_llm_messages

    async def stream(self, request: GenerationRequest) -> AsyncIterator[StreamEvent]:
        """Start a generation and yield its delta events in order.

        Args:
            request: System prompt, role-tagged turns and trigger message.

        Yields:
            Stream events.

        Raises:
            LLMError: If the model call or the stream fails.
        """
        history, prompt = self.build_messages(request)
        self._log_messages(request.system_prompt, history, prompt)

        tools: list = []
        invocation_state: dict[str, Any] = {}
        if self._effect_tools_factory:
            tools.extend(self._effect_tools_factory.tools)
            invocation_state.update(
                self._effect_tools_factory.get_invocation_state(request.trigger)
            )

        agent = Agent(
            model=self._models.get(request.model_id),
            system_prompt=request.system_prompt,
            tools=tools,
            messages=history,
            callback_handler=None,
        )

        mapper = StrandsEventMapper()
        try:
            async for event in agent.stream_async(prompt, **invocation_state):
                for mapped in mapper.map(event):
                    yield mapped
        except Exception as e:
            logger.error("Generation failed: %s", e)
            raise map_strands_exception(e) from e

    def build_messages(
        self, request: GenerationRequest
    ) -> tuple[list[dict[str, Any]], str]:
        """Split turns into agent history and the prompt to answer.

        The last turn becomes the prompt. Leading assistant turns are dropped
        since the history must start with a user turn.

        Args:
            request: Generation request.

        Returns:
            (history messages, prompt)
        """
        if not request.turns:
            return [], request.trigger.text

        *earlier, last = request.turns
        while earlier and earlier[0].role == "assistant":
            earlier.pop(0)

        history = [
            {"role": turn.role, "content": [{"text": turn.content}]} for turn in earlier
        ]
        return history, last.content

    def _log_messages(
        self, system_prompt: str, history: list[dict[str, Any]], prompt: str
    ) -> None:
        if not (self._debug_llm_messages or logger.isEnabledFor(logging.DEBUG)):
            return
        log_func = logger.info if self._debug_llm_messages else logger.debug
        log_func("=== LLM Request ===")
        log_func("[system]\n%s", system_prompt)
        for message in history:
            log_func("[%s]\n%s", message["role"], message["content"][0]["text"])
        log_func("[user]\n%s", prompt)
        log_func("=== End of Request ===")
