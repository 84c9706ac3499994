"""Incremental rendering of a streaming generation into one display string."""

import logging
import time
from collections.abc import AsyncIterable, Awaitable, Callable
from dataclasses import dataclass, field

from hibiki.domain.entities import (
    Abort,
    ReasoningDelta,
    StreamEvent,
    TextDelta,
    ToolCall,
    ToolInputDelta,
    ToolInputEnd,
    ToolInputStart,
)

logger = logging.getLogger(__name__)

PLACEHOLDER = "(...)"
REDACTED_REASONING = "[REDACTED]"
MIN_GROWTH_CHARS = 50
MIN_INTERVAL_MS = 6000

# (snapshot, final) -> None
SnapshotSink = Callable[[str, bool], Awaitable[None]]


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


@dataclass
class StreamState:
    """Mutable state of one generation being rendered.

    Attributes:
        aborted: Whether an Abort event was consumed.
        reasoning: Accumulated reasoning text.
        text: Accumulated answer text.
        active_tool: Name of the tool whose arguments are streaming, if any.
        tool_arguments: Raw argument text per tool name.
        tool_calls: Complete tool calls seen so far.
        last_pushed: Snapshot of the last delivery attempt.
        last_push_at: Clock value (ms) of the last delivery attempt.
    """

    aborted: bool = False
    reasoning: str = ""
    text: str = ""
    active_tool: str | None = None
    tool_arguments: dict[str, str] = field(default_factory=dict)
    tool_calls: list[ToolCall] = field(default_factory=list)
    last_pushed: str = ""
    last_push_at: float | None = None


@dataclass(frozen=True)
class RenderResult:
    """Outcome of rendering one generation.

    Attributes:
        snapshot: The final snapshot that was delivered.
        text: Final answer text (without reasoning or tool blocks).
        aborted: Whether the stream was aborted.
        tool_calls: Complete tool calls in arrival order.
        deliveries: Number of sink calls, including the final one.
    """

    snapshot: str
    text: str
    aborted: bool
    tool_calls: list[ToolCall]
    deliveries: int


class StreamRenderer:
    """Merges reasoning, answer and tool-argument deltas into snapshots.

    After every event a snapshot is computed and pushed to the sink only when
    it grew by at least ``min_growth`` characters AND ``min_interval_ms``
    elapsed since the previous push. Once the stream ends (or is aborted) the
    final snapshot is always pushed with ``final=True``.
    """

    def __init__(
        self,
        *,
        show_reasoning: bool = False,
        min_growth: int = MIN_GROWTH_CHARS,
        min_interval_ms: float = MIN_INTERVAL_MS,
        tool_notice: str = "\n(ツール使用中: {name})",
        clock: Callable[[], float] = _monotonic_ms,
    ) -> None:
        """Initialize the renderer.

        Args:
            show_reasoning: Whether reasoning is shown as a quoted block.
            min_growth: Minimum snapshot growth between pushes.
            min_interval_ms: Minimum time between pushes.
            tool_notice: Text appended to the answer when a tool starts.
            clock: Millisecond clock (monotonic).
        """
        self._show_reasoning = show_reasoning
        self._min_growth = min_growth
        self._min_interval_ms = min_interval_ms
        self._tool_notice = tool_notice
        self._clock = clock

    def snapshot(self, state: StreamState) -> str:
        """Render the current buffers into a display string.

        Args:
            state: Current stream state.

        Returns:
            The snapshot, or the placeholder when everything is empty.
        """
        parts: list[str] = []

        reasoning = state.reasoning.strip()
        if self._show_reasoning and reasoning and reasoning != REDACTED_REASONING:
            parts.append("> " + reasoning.replace("\n", "\n> ") + "\n\n")

        parts.append(state.text)

        if state.active_tool is not None:
            arguments = state.tool_arguments.get(state.active_tool, "")
            parts.append("\n```json\n" + arguments + "\n```")

        return "".join(parts) or PLACEHOLDER

    def apply(self, state: StreamState, event: StreamEvent) -> None:
        """Fold one event into the state."""
        if isinstance(event, Abort):
            state.aborted = True
        elif isinstance(event, ReasoningDelta):
            state.reasoning += event.text
        elif isinstance(event, TextDelta):
            state.text += event.text
        elif isinstance(event, ToolInputStart):
            state.text += self._tool_notice.format(name=event.tool_name)
            state.active_tool = event.tool_name
            state.tool_arguments[event.tool_name] = ""
        elif isinstance(event, ToolInputDelta):
            if state.active_tool is None:
                logger.debug("Dropping tool input delta without an active tool")
            else:
                state.tool_arguments[state.active_tool] += event.fragment
        elif isinstance(event, ToolInputEnd):
            state.active_tool = None
        elif isinstance(event, ToolCall):
            state.tool_calls.append(event)
        else:
            logger.debug("Ignoring unknown stream event: %r", event)

    def should_push(self, state: StreamState, snapshot: str, now: float) -> bool:
        """Throttle gate: both growth and interval must be satisfied."""
        grown = len(snapshot) - len(state.last_pushed) >= self._min_growth
        waited = (
            state.last_push_at is None
            or now - state.last_push_at >= self._min_interval_ms
        )
        return grown and waited

    async def render(
        self,
        events: AsyncIterable[StreamEvent],
        sink: SnapshotSink,
    ) -> RenderResult:
        """Consume an event stream and push snapshots to the sink.

        A sink failure on an intermediate push is logged and consumption
        continues. A failure on the final push propagates, as does any error
        raised by the event stream.

        Args:
            events: Delta events in generation order.
            sink: Async callable receiving (snapshot, final).

        Returns:
            The render result.
        """
        state = StreamState()
        deliveries = 0

        try:
            async for event in events:
                self.apply(state, event)
                if state.aborted:
                    logger.info("Stream aborted; stopping consumption")
                    break

                now = self._clock()
                snapshot = self.snapshot(state)
                if not self.should_push(state, snapshot, now):
                    continue

                state.last_pushed = snapshot
                state.last_push_at = now
                deliveries += 1
                try:
                    await sink(snapshot, False)
                except Exception:
                    logger.warning(
                        "Intermediate snapshot delivery failed", exc_info=True
                    )
        finally:
            # 中断した場合も元のジェネレータを閉じる
            aclose = getattr(events, "aclose", None)
            if aclose is not None:
                await aclose()

        final_snapshot = self.snapshot(state)
        deliveries += 1
        await sink(final_snapshot, True)

        return RenderResult(
            snapshot=final_snapshot,
            text=state.text,
            aborted=state.aborted,
            tool_calls=list(state.tool_calls),
            deliveries=deliveries,
        )
