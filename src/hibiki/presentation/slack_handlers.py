"""Slack event and slash command handlers."""

import logging
from typing import Any

from slack_bolt.async_app import AsyncApp

from hibiki.application.handlers import COMMANDS, ChatCommandHandler, ChatMessageHandler
from hibiki.infrastructure.slack import SlackEventAdapter, render_mrkdwn

logger = logging.getLogger(__name__)

# Message subtypes that carry a new user message
_HANDLED_SUBTYPES = frozenset({None, "file_share", "thread_broadcast"})


def register_handlers(
    app: AsyncApp,
    message_handler: ChatMessageHandler,
    command_handler: ChatCommandHandler,
    event_adapter: SlackEventAdapter,
    bot_user_id: str,
) -> None:
    """Register Slack event and command handlers.

    Args:
        app: AsyncApp instance.
        message_handler: Orchestrator for incoming messages.
        command_handler: Slash command implementation.
        event_adapter: Adapter for converting events to entities.
        bot_user_id: The bot's user ID.
    """

    @app.event("app_mention")
    async def handle_app_mention(event: dict) -> None:
        """Handle app_mention events (no-op).

        The same message also arrives as a message event, which does the
        actual processing.
        """
        logger.debug("Received app_mention event: %s", event.get("ts"))

    @app.event("message")
    async def handle_message(event: dict) -> None:
        """Handle message events.

        Args:
            event: Slack event payload.
        """
        subtype = event.get("subtype")
        if subtype not in _HANDLED_SUBTYPES:
            logger.debug("Ignoring message subtype %s", subtype)
            return

        if event.get("user") == bot_user_id or event.get("bot_id"):
            return

        logger.info(
            "Processing message event: ts=%s, channel=%s",
            event.get("ts"),
            event.get("channel"),
        )

        try:
            message = await event_adapter.to_message(event)
        except Exception:
            logger.exception("Error converting event to message")
            return

        try:
            await message_handler.handle(message)
        except Exception:
            logger.exception("Error handling message event")

    for spec in COMMANDS:
        app.command(f"/{spec.name}")(_make_command_listener(spec.name, command_handler))


def _make_command_listener(name: str, command_handler: ChatCommandHandler) -> Any:
    async def listener(ack: Any, command: dict, respond: Any) -> None:
        await ack()
        chat_id = command.get("channel_id", "")
        try:
            reply = await command_handler.handle(name, chat_id, command.get("text", ""))
        except Exception:
            logger.exception("Error handling /%s", name)
            reply = f"/{name} の実行中にエラーが発生しました。"
        await respond(text=render_mrkdwn(reply), response_type="in_channel")

    return listener
