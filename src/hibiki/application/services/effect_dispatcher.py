"""Execution of model-requested effects (remember / auto_reply / reply_after)."""

import asyncio
import json
import logging
from collections.abc import Callable
from typing import Any

from hibiki.application.services.auto_reply import AutoReplyService
from hibiki.domain.entities import (
    AutoReplyPayload,
    DeferredReply,
    EffectOutcome,
    Message,
    RememberPayload,
    ReplyAfterPayload,
    parse_effect_payload,
)
from hibiki.domain.exceptions import (
    EffectValidationError,
    RuleCompileError,
    TransportError,
)
from hibiki.domain.repositories import MemoryRepository
from hibiki.domain.services import (
    MessagingService,
    ScheduledHandle,
    Scheduler,
    extract_exec_blocks,
    substitute_sender,
)

logger = logging.getLogger(__name__)


def _identity(text: str) -> str:
    return text


class ToolEffectDispatcher:
    """Validates effect payloads and routes them to their side effects.

    Payloads arrive either as live tool calls during a generation or as
    ``exec`` fenced blocks in a finished answer. Both surfaces share the same
    schemas and effects, and every payload succeeds or fails on its own.
    """

    def __init__(
        self,
        rule_service: AutoReplyService,
        memory_repository: MemoryRepository,
        scheduler: Scheduler,
        messaging_service: MessagingService,
        formatter: Callable[[str], str] = _identity,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            rule_service: Auto-reply rule store.
            memory_repository: Memory persistence.
            scheduler: Delayed callback scheduler.
            messaging_service: Transport for acknowledgements and deferred replies.
            formatter: Markdown to platform markup conversion for deferred replies.
        """
        self._rule_service = rule_service
        self._memory_repository = memory_repository
        self._scheduler = scheduler
        self._messaging_service = messaging_service
        self._formatter = formatter

    async def execute(
        self,
        trigger: Message,
        payload: AutoReplyPayload | ReplyAfterPayload | RememberPayload,
    ) -> str:
        """Run one validated effect.

        Args:
            trigger: Message whose generation requested the effect.
            payload: Validated payload.

        Returns:
            Acknowledgement text.

        Raises:
            RuleCompileError: If an auto_reply pattern does not compile.
        """
        if isinstance(payload, RememberPayload):
            note = await self._memory_repository.add(trigger.chat_id, payload.message)
            logger.info("Stored memory %s in chat %s", note.id, trigger.chat_id)
            return f"覚えました: {payload.message}"

        if isinstance(payload, AutoReplyPayload):
            rule = await self._rule_service.register_rule(
                trigger.chat_id, payload.when, payload.message
            )
            return f"自動返信ルール #{rule.id} を登録しました"

        if isinstance(payload, ReplyAfterPayload):
            self.schedule_reply(
                DeferredReply(
                    chat_id=trigger.chat_id,
                    trigger=trigger,
                    delay_ms=payload.timeout,
                    template=payload.message,
                )
            )
            return f"{payload.timeout:g} ミリ秒後の返信を登録しました"

        raise TypeError(f"Unsupported effect payload: {payload!r}")

    def schedule_reply(self, reply: DeferredReply) -> ScheduledHandle:
        """Register a one-shot delivery of a deferred reply.

        Args:
            reply: Deferred reply to deliver.

        Returns:
            Scheduler handle.
        """

        async def deliver() -> None:
            text = substitute_sender(reply.template, reply.trigger.user)
            try:
                await self._messaging_service.send_message(
                    reply.chat_id,
                    self._formatter(text),
                    reply_to=reply.trigger.reply_anchor,
                )
            except TransportError:
                logger.exception(
                    "Failed to deliver deferred reply in chat %s", reply.chat_id
                )

        handle = self._scheduler.register(reply.delay_ms, deliver)
        logger.info(
            "Scheduled deferred reply %s in chat %s after %.0f ms",
            handle.id,
            reply.chat_id,
            reply.delay_ms,
        )
        return handle

    async def dispatch(self, trigger: Message, raw: str | dict[str, Any]) -> EffectOutcome:
        """Validate and run one raw payload without raising.

        Args:
            trigger: Message whose generation requested the effect.
            raw: JSON text or decoded tool arguments.

        Returns:
            Outcome describing success or the validation error.
        """
        try:
            payload = parse_effect_payload(raw)
        except EffectValidationError as e:
            logger.warning("Rejected effect payload in chat %s: %s", trigger.chat_id, e)
            return EffectOutcome(
                kind=None,
                ok=False,
                summary=f"コマンドの登録に失敗しました {e.raw}\nエラー: {e.detail}",
                raw=e.raw,
            )

        raw_text = _raw_text(raw)
        try:
            summary = await self.execute(trigger, payload)
        except RuleCompileError as e:
            logger.warning("Rejected auto-reply pattern in chat %s: %s", trigger.chat_id, e)
            return EffectOutcome(
                kind=payload.kind,
                ok=False,
                summary=f"コマンドの登録に失敗しました {raw_text}\nエラー: {e}",
                raw=raw_text,
            )
        return EffectOutcome(kind=payload.kind, ok=True, summary=summary, raw=raw_text)

    async def run_tool(self, trigger: Message, arguments: dict[str, Any]) -> EffectOutcome:
        """Handle a live tool call and post its outcome to the chat.

        Args:
            trigger: Message whose generation called the tool.
            arguments: Tool input including ``kind``.

        Returns:
            The effect outcome.
        """
        outcome = await self.dispatch(trigger, arguments)
        await self._report(trigger, outcome.summary)
        return outcome

    async def run_exec_blocks(self, trigger: Message, text: str) -> list[EffectOutcome]:
        """Run every ``exec`` block in a finished answer.

        All blocks are settled independently. One chat message per block
        reports either the registered effect kind or the validation error.

        Args:
            trigger: Message that was answered.
            text: Final answer text.

        Returns:
            Outcomes in block order.
        """
        blocks = extract_exec_blocks(text)
        if not blocks:
            return []

        logger.info("Running %d exec block(s) in chat %s", len(blocks), trigger.chat_id)
        results = await asyncio.gather(
            *(self._run_block(trigger, block) for block in blocks),
            return_exceptions=True,
        )

        outcomes: list[EffectOutcome] = []
        for block, result in zip(blocks, results):
            if isinstance(result, BaseException):
                logger.error(
                    "Exec block failed in chat %s",
                    trigger.chat_id,
                    exc_info=result,
                )
                summary = f"コマンドの実行に失敗しました {block}\nエラー: {result}"
                await self._report(trigger, summary)
                outcomes.append(
                    EffectOutcome(kind=None, ok=False, summary=summary, raw=block)
                )
            else:
                outcomes.append(result)
        return outcomes

    async def _run_block(self, trigger: Message, block: str) -> EffectOutcome:
        outcome = await self.dispatch(trigger, block)
        if outcome.ok:
            await self._report(trigger, f"コマンドを登録しました: {outcome.kind}")
        else:
            await self._report(trigger, outcome.summary)
        return outcome

    async def _report(self, trigger: Message, text: str) -> None:
        """Post an acknowledgement as a reply to the trigger (best-effort)."""
        try:
            await self._messaging_service.send_message(
                trigger.chat_id, text, reply_to=trigger.reply_anchor
            )
        except TransportError:
            logger.exception("Failed to report effect outcome in chat %s", trigger.chat_id)


def _raw_text(raw: str | dict[str, Any]) -> str:
    """Raw payload text as shown to users."""
    if isinstance(raw, str):
        return raw
    return json.dumps(raw, ensure_ascii=False)
