"""Tests for StrandsResponseStreamer and StrandsEventMapper."""

from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from hibiki.application.services.stream_renderer import StreamRenderer
from hibiki.domain.entities import (
    ChatTurn,
    GenerationRequest,
    Message,
    ReasoningDelta,
    TextDelta,
    ToolCall,
    ToolInputDelta,
    ToolInputEnd,
    ToolInputStart,
    User,
)
from hibiki.infrastructure.llm.exceptions import LLMError, LLMRateLimitError
from hibiki.infrastructure.llm.strands.response_streamer import (
    StrandsEventMapper,
    StrandsResponseStreamer,
)

STREAMER_MODULE = "hibiki.infrastructure.llm.strands.response_streamer"


@pytest.fixture
def trigger() -> Message:
    return Message(
        id="1.000",
        chat_id="C001",
        user=User(id="U001", name="alice"),
        text="元気？",
        timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def mock_model() -> MagicMock:
    """Create mock LiteLLMModel."""
    return MagicMock()


@pytest.fixture
def model_provider(mock_model: MagicMock) -> MagicMock:
    provider = MagicMock()
    provider.get.return_value = mock_model
    return provider


@pytest.fixture
def streamer(model_provider: MagicMock) -> StrandsResponseStreamer:
    return StrandsResponseStreamer(model_provider=model_provider)


def agent_with_events(events: list[dict[str, Any]], error: Exception | None = None):
    """Create a mock Agent whose stream_async yields the given events."""
    calls: list[tuple[str, dict[str, Any]]] = []

    async def stream_async(prompt: str, **kwargs: Any):
        calls.append((prompt, kwargs))
        for event in events:
            yield event
        if error is not None:
            raise error

    agent = MagicMock()
    agent.stream_async = stream_async
    agent.calls = calls
    return agent


async def collect(streamer: StrandsResponseStreamer, request: GenerationRequest):
    return [event async for event in streamer.stream(request)]


class TestStrandsEventMapper:
    """StrandsEventMapper のテスト"""

    def test_text_and_reasoning(self) -> None:
        mapper = StrandsEventMapper()

        assert mapper.map({"data": "こん"}) == [TextDelta(text="こん")]
        assert mapper.map({"reasoningText": "hmm"}) == [ReasoningDelta(text="hmm")]

    def test_tool_input_lifecycle(self) -> None:
        mapper = StrandsEventMapper()

        start = mapper.map(
            {
                "event": {
                    "contentBlockStart": {
                        "start": {"toolUse": {"name": "remember", "toolUseId": "t1"}}
                    }
                }
            }
        )
        delta = mapper.map(
            {
                "event": {
                    "contentBlockDelta": {"delta": {"toolUse": {"input": '{"message"'}}}
                }
            }
        )
        stop = mapper.map({"event": {"contentBlockStop": {}}})

        assert start == [ToolInputStart(tool_name="remember")]
        assert delta == [ToolInputDelta(fragment='{"message"')]
        assert stop == [ToolInputEnd()]

    def test_text_block_stop_is_ignored(self) -> None:
        mapper = StrandsEventMapper()
        assert mapper.map({"event": {"contentBlockStop": {}}}) == []

    def test_assistant_message_tool_calls(self) -> None:
        mapper = StrandsEventMapper()
        event = {
            "message": {
                "role": "assistant",
                "content": [
                    {"text": "ok"},
                    {
                        "toolUse": {
                            "name": "remember",
                            "input": {"message": "x"},
                            "toolUseId": "t1",
                        }
                    },
                ],
            }
        }

        assert mapper.map(event) == [
            ToolCall(tool_name="remember", arguments={"message": "x"}, call_id="t1")
        ]

    def test_force_stop_is_not_an_abort(self) -> None:
        """force_stop は後続の例外を待つためイベントにしない"""
        mapper = StrandsEventMapper()
        assert mapper.map({"force_stop": True, "force_stop_reason": "x"}) == []

    def test_unrelated_event(self) -> None:
        assert StrandsEventMapper().map({"init_event_loop": True}) == []


class TestBuildMessages:
    """build_messages のテスト"""

    def test_last_turn_is_prompt(self, streamer, trigger) -> None:
        request = GenerationRequest(
            system_prompt="S",
            turns=[
                ChatTurn(role="assistant", content="いらっしゃい"),
                ChatTurn(role="user", content="a"),
                ChatTurn(role="assistant", content="b"),
                ChatTurn(role="user", content="c"),
            ],
            trigger=trigger,
        )

        history, prompt = streamer.build_messages(request)

        assert prompt == "c"
        assert history == [
            {"role": "user", "content": [{"text": "a"}]},
            {"role": "assistant", "content": [{"text": "b"}]},
        ]

    def test_no_turns_uses_trigger(self, streamer, trigger) -> None:
        request = GenerationRequest(system_prompt="S", turns=[], trigger=trigger)

        assert streamer.build_messages(request) == ([], "元気？")


class TestStream:
    """stream のテスト"""

    async def test_yields_mapped_events(self, streamer, mock_model, trigger) -> None:
        request = GenerationRequest(
            system_prompt="S",
            turns=[ChatTurn(role="user", content="元気？")],
            trigger=trigger,
        )
        agent = agent_with_events([{"data": "元気"}, {"data": "です"}])

        with patch(f"{STREAMER_MODULE}.Agent", return_value=agent) as mock_agent_class:
            events = await collect(streamer, request)

        assert events == [TextDelta(text="元気"), TextDelta(text="です")]
        kwargs = mock_agent_class.call_args.kwargs
        assert kwargs["model"] is mock_model
        assert kwargs["system_prompt"] == "S"
        assert kwargs["messages"] == []
        assert agent.calls[0][0] == "元気？"

    async def test_effect_tools_and_invocation_state(
        self, model_provider, trigger
    ) -> None:
        tools_factory = MagicMock()
        tools_factory.tools = ["tool"]
        tools_factory.get_invocation_state.return_value = {"effect_dispatcher": "d"}
        streamer = StrandsResponseStreamer(
            model_provider=model_provider,
            effect_tools_factory=tools_factory,
        )
        request = GenerationRequest(system_prompt="S", turns=[], trigger=trigger)
        agent = agent_with_events([])

        with patch(f"{STREAMER_MODULE}.Agent", return_value=agent) as mock_agent_class:
            await collect(streamer, request)

        assert mock_agent_class.call_args.kwargs["tools"] == ["tool"]
        tools_factory.get_invocation_state.assert_called_once_with(trigger)
        assert agent.calls[0][1] == {"effect_dispatcher": "d"}

    async def test_model_override(self, streamer, model_provider, trigger) -> None:
        request = GenerationRequest(
            system_prompt="S", turns=[], trigger=trigger, model_id="openrouter/other"
        )
        agent = agent_with_events([])

        with patch(f"{STREAMER_MODULE}.Agent", return_value=agent):
            await collect(streamer, request)

        model_provider.get.assert_called_once_with("openrouter/other")

    async def test_stream_error_is_mapped(self, streamer, trigger) -> None:
        request = GenerationRequest(system_prompt="S", turns=[], trigger=trigger)
        agent = agent_with_events([{"data": "x"}], error=RuntimeError("rate limit"))

        with patch(f"{STREAMER_MODULE}.Agent", return_value=agent):
            with pytest.raises(LLMRateLimitError):
                await collect(streamer, request)

    async def test_unknown_error_is_llm_error(self, streamer, trigger) -> None:
        request = GenerationRequest(system_prompt="S", turns=[], trigger=trigger)
        agent = agent_with_events([], error=RuntimeError("boom"))

        with patch(f"{STREAMER_MODULE}.Agent", return_value=agent):
            with pytest.raises(LLMError):
                await collect(streamer, request)

    async def test_force_stop_then_error_reaches_renderer(self, streamer, trigger) -> None:
        """force_stop の後の例外は描画側まで伝わる"""
        request = GenerationRequest(system_prompt="S", turns=[], trigger=trigger)
        agent = agent_with_events(
            [
                {"data": "partial answer"},
                {"force_stop": True, "force_stop_reason": "connection lost"},
            ],
            error=ConnectionError("connection lost"),
        )
        sink = AsyncMock()

        with patch(f"{STREAMER_MODULE}.Agent", return_value=agent):
            with pytest.raises(LLMError):
                await StreamRenderer().render(streamer.stream(request), sink)

        assert all(call.args[1] is False for call in sink.call_args_list)
