"""Per-message orchestration: auto-replies, caching and streamed responses."""

import logging
import random
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timezone

from hibiki.application.services.auto_reply import AutoReplyService
from hibiki.application.services.context_cache import ContextCache
from hibiki.application.services.effect_dispatcher import ToolEffectDispatcher
from hibiki.application.services.stream_renderer import StreamRenderer
from hibiki.config.models import ResponseConfig
from hibiki.domain.entities import GenerationRequest, Message, MessageOrigin, User
from hibiki.domain.exceptions import TransportError
from hibiki.domain.repositories import (
    ChatSettingRepository,
    MemoryRepository,
    PromptRepository,
)
from hibiki.domain.services import (
    MessagingService,
    PromptBuilder,
    QuestionJudgment,
    ResponseStreamer,
)

logger = logging.getLogger(__name__)

MESSAGE_WINDOW_KEY = "message_window"
MODEL_KEY = "model"
MEMORY_LIMIT = 50

PLACEHOLDER_TEXT = "返答を生成しています..."
APOLOGY_TEXT = "ごめんなさい、返答の生成中にエラーが発生しました。"
ATTACHMENT_TEXT = "[添付ファイル]"


def _identity(text: str) -> str:
    return text


class ChatMessageHandler:
    """Handles one incoming chat message end to end.

    1. fire matching auto-reply rules
    2. cache the message in the chat's context window
    3. decide whether to answer (mention, thread reply to the bot, or a
       probabilistic question check)
    4. stream a generated answer into an edited placeholder message
    5. run ``exec`` blocks of the finished answer
    """

    def __init__(
        self,
        *,
        messaging_service: MessagingService,
        response_streamer: ResponseStreamer,
        renderer: StreamRenderer,
        rule_service: AutoReplyService,
        dispatcher: ToolEffectDispatcher,
        context_cache: ContextCache,
        memory_repository: MemoryRepository,
        prompt_repository: PromptRepository,
        chat_setting_repository: ChatSettingRepository,
        prompt_builder: PromptBuilder,
        question_judgment: QuestionJudgment,
        response_config: ResponseConfig,
        default_prompt: str,
        bot_user_id: str,
        bot_name: str,
        formatter: Callable[[str], str] = _identity,
        random_source: Callable[[], float] = random.random,
    ) -> None:
        """Initialize the handler.

        Args:
            messaging_service: Transport.
            response_streamer: Streaming generation service.
            renderer: Snapshot renderer with throttle gate.
            rule_service: Auto-reply rules.
            dispatcher: Effect dispatcher for ``exec`` blocks.
            context_cache: Per-chat message window.
            memory_repository: Chat memories.
            prompt_repository: Per-chat prompt overrides.
            chat_setting_repository: Per-chat key/value settings.
            prompt_builder: System prompt and turn construction.
            question_judgment: Yes/no question classifier.
            response_config: Response settings.
            default_prompt: Prompt used when a chat has no override.
            bot_user_id: The bot's user ID.
            bot_name: The bot's handle.
            formatter: Markdown to platform markup conversion.
            random_source: Uniform [0, 1) source for the question gate.
        """
        self._messaging = messaging_service
        self._streamer = response_streamer
        self._renderer = renderer
        self._rule_service = rule_service
        self._dispatcher = dispatcher
        self._context_cache = context_cache
        self._memory_repository = memory_repository
        self._prompt_repository = prompt_repository
        self._settings = chat_setting_repository
        self._prompt_builder = prompt_builder
        self._question_judgment = question_judgment
        self._config = response_config
        self._default_prompt = default_prompt
        self._bot_user = User(id=bot_user_id, name=bot_name, is_bot=True)
        self._formatter = formatter
        self._random = random_source

    async def handle(self, message: Message) -> None:
        """Process an incoming message.

        Args:
            message: Incoming message.
        """
        await self._run_auto_replies(message)

        if message.user is None:
            return

        chat_id = message.chat_id
        if not message.text:
            if message.has_attachments:
                await self._sync_window(chat_id)
                self._context_cache.add_message(
                    chat_id, replace(message, text=ATTACHMENT_TEXT)
                )
            return

        if message.text.startswith("/"):
            return

        await self._sync_window(chat_id)
        self._context_cache.add_message(chat_id, message)

        if not await self.should_respond(message):
            return

        allow_list = self._config.chat_allow_list
        if allow_list is not None and chat_id not in allow_list:
            logger.info("Chat %s is not on the allow list; not responding", chat_id)
            return

        await self._respond(message)

    async def should_respond(self, message: Message) -> bool:
        """Decide whether the bot answers a message.

        Args:
            message: Incoming message with text.

        Returns:
            True if a response should be generated.
        """
        bot_id = self._bot_user.id
        if message.mentions_user(bot_id) or message.is_reply_to(bot_id):
            return True

        if not any(keyword in message.text for keyword in self._config.question_keywords):
            return False

        if self._random() >= self._config.question_probability:
            return False

        try:
            return await self._question_judgment.is_question(message.text)
        except Exception:
            logger.warning("Question judgment raised; not responding", exc_info=True)
            return False

    async def _run_auto_replies(self, message: Message) -> None:
        try:
            evaluation = await self._rule_service.match_incoming(message.chat_id, message)
        except Exception:
            logger.exception("Failed to evaluate auto-reply rules in %s", message.chat_id)
            return

        for diagnostic in evaluation.diagnostics:
            logger.warning(
                "Auto-reply rule %s in %s is broken: %s",
                diagnostic.rule.id,
                message.chat_id,
                diagnostic.error,
            )

        for match in evaluation.matches:
            try:
                await self._messaging.send_message(
                    message.chat_id,
                    self._formatter(match.reply),
                    reply_to=message.reply_anchor,
                )
            except TransportError:
                logger.warning(
                    "Failed to send auto-reply for rule %s", match.rule.id, exc_info=True
                )

    async def _sync_window(self, chat_id: str) -> None:
        """Apply the chat's message_window setting to the context cache."""
        raw = await self._settings.get(chat_id, MESSAGE_WINDOW_KEY)
        window: int | None = None
        if raw is not None:
            try:
                window = int(raw)
            except ValueError:
                logger.warning("Ignoring invalid message_window %r in %s", raw, chat_id)
            else:
                if window < 1:
                    window = None
        self._context_cache.set_chat_window(chat_id, window)

    async def build_request(self, message: Message) -> GenerationRequest:
        """Build the generation request for a message.

        Args:
            message: Message to answer (already cached).

        Returns:
            Generation request.
        """
        chat_id = message.chat_id
        prompt = await self._prompt_repository.get(chat_id) or self._default_prompt
        memories = await self._memory_repository.find_recent(chat_id, MEMORY_LIMIT)
        model_id = await self._settings.get(chat_id, MODEL_KEY)

        system_prompt = self._prompt_builder.build_system_prompt(
            prompt, self._bot_user.name, memories
        )
        turns = self._prompt_builder.build_turns(
            self._context_cache.get_messages(chat_id)
        )
        return GenerationRequest(
            system_prompt=system_prompt,
            turns=turns,
            trigger=message,
            model_id=model_id or None,
        )

    async def _respond(self, message: Message) -> None:
        chat_id = message.chat_id
        try:
            placeholder_id = await self._messaging.send_message(
                chat_id, PLACEHOLDER_TEXT, reply_to=message.reply_anchor
            )
        except TransportError:
            logger.exception("Failed to post placeholder in %s", chat_id)
            return

        async def sink(snapshot: str, final: bool) -> None:
            await self._messaging.edit_message(
                chat_id, placeholder_id, self._formatter(snapshot)
            )

        try:
            request = await self.build_request(message)
            result = await self._renderer.render(self._streamer.stream(request), sink)
        except Exception:
            logger.exception("Response generation failed in %s", chat_id)
            await self._apologize(message)
            return

        logger.info(
            "Responded in %s (%d chars, %d deliveries%s)",
            chat_id,
            len(result.text),
            result.deliveries,
            ", aborted" if result.aborted else "",
        )

        await self._dispatcher.run_exec_blocks(message, result.text)

        self._context_cache.add_message(
            chat_id,
            Message(
                id=placeholder_id,
                chat_id=chat_id,
                user=self._bot_user,
                text=result.text,
                timestamp=datetime.now(timezone.utc),
                origin=MessageOrigin.ASSISTANT,
            ),
        )

    async def _apologize(self, message: Message) -> None:
        try:
            await self._messaging.send_message(
                message.chat_id, APOLOGY_TEXT, reply_to=message.reply_anchor
            )
        except TransportError:
            logger.exception("Failed to send apology in %s", message.chat_id)

