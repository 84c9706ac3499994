"""Tests for Slack event handlers."""

from typing import Any
from unittest.mock import AsyncMock, Mock

import pytest

from hibiki.application.handlers import COMMANDS
from hibiki.presentation.slack_handlers import register_handlers


@pytest.fixture
def mock_message_handler() -> AsyncMock:
    """Create a mock ChatMessageHandler."""
    return AsyncMock()


@pytest.fixture
def mock_command_handler() -> AsyncMock:
    """Create a mock ChatCommandHandler."""
    handler = AsyncMock()
    handler.handle.return_value = "**done**"
    return handler


@pytest.fixture
def mock_event_adapter() -> AsyncMock:
    """Create a mock SlackEventAdapter."""
    return AsyncMock()


@pytest.fixture
def bot_user_id() -> str:
    """Bot user ID for testing."""
    return "U_BOT_123"


@pytest.fixture
def registered_handlers(
    mock_message_handler: AsyncMock,
    mock_command_handler: AsyncMock,
    mock_event_adapter: AsyncMock,
    bot_user_id: str,
) -> dict[str, Any]:
    """Register handlers and return captured handler dict."""
    handlers: dict[str, Any] = {}
    mock_app = Mock()

    def capture(name: str):
        def decorator(func):
            handlers[name] = func
            return func

        return decorator

    mock_app.event = capture
    mock_app.command = capture

    register_handlers(
        mock_app,
        mock_message_handler,
        mock_command_handler,
        mock_event_adapter,
        bot_user_id,
    )

    return handlers


class TestMessageHandler:
    """message イベントハンドラのテスト"""

    async def test_user_message_is_handled(
        self,
        registered_handlers: dict[str, Any],
        mock_event_adapter: AsyncMock,
        mock_message_handler: AsyncMock,
    ) -> None:
        event = {"type": "message", "user": "U001", "channel": "C001", "ts": "1.0"}

        await registered_handlers["message"](event=event)

        mock_event_adapter.to_message.assert_awaited_once_with(event)
        mock_message_handler.handle.assert_awaited_once_with(
            mock_event_adapter.to_message.return_value
        )

    async def test_file_share_is_handled(
        self,
        registered_handlers: dict[str, Any],
        mock_message_handler: AsyncMock,
    ) -> None:
        event = {"subtype": "file_share", "user": "U001", "channel": "C001", "ts": "1.0"}

        await registered_handlers["message"](event=event)

        mock_message_handler.handle.assert_awaited_once()

    @pytest.mark.parametrize("subtype", ["message_changed", "message_deleted", "bot_message"])
    async def test_other_subtypes_are_ignored(
        self,
        registered_handlers: dict[str, Any],
        mock_message_handler: AsyncMock,
        subtype: str,
    ) -> None:
        event = {"subtype": subtype, "channel": "C001", "ts": "1.0"}

        await registered_handlers["message"](event=event)

        mock_message_handler.handle.assert_not_called()

    async def test_own_messages_are_ignored(
        self,
        registered_handlers: dict[str, Any],
        mock_message_handler: AsyncMock,
        bot_user_id: str,
    ) -> None:
        event = {"user": bot_user_id, "channel": "C001", "ts": "1.0"}

        await registered_handlers["message"](event=event)

        mock_message_handler.handle.assert_not_called()

    async def test_handler_errors_are_logged(
        self,
        registered_handlers: dict[str, Any],
        mock_message_handler: AsyncMock,
    ) -> None:
        mock_message_handler.handle.side_effect = RuntimeError("boom")
        event = {"user": "U001", "channel": "C001", "ts": "1.0"}

        await registered_handlers["message"](event=event)


class TestCommandListeners:
    """スラッシュコマンドのテスト"""

    def test_every_command_is_registered(
        self, registered_handlers: dict[str, Any]
    ) -> None:
        for spec in COMMANDS:
            assert f"/{spec.name}" in registered_handlers

    async def test_command_reply_is_rendered(
        self,
        registered_handlers: dict[str, Any],
        mock_command_handler: AsyncMock,
    ) -> None:
        ack = AsyncMock()
        respond = AsyncMock()

        await registered_handlers["/rules"](
            ack=ack, command={"channel_id": "C001", "text": ""}, respond=respond
        )

        ack.assert_awaited_once()
        mock_command_handler.handle.assert_awaited_once_with("rules", "C001", "")
        respond.assert_awaited_once_with(text="*done*", response_type="in_channel")

    async def test_command_failure(
        self,
        registered_handlers: dict[str, Any],
        mock_command_handler: AsyncMock,
    ) -> None:
        mock_command_handler.handle.side_effect = RuntimeError("boom")
        respond = AsyncMock()

        await registered_handlers["/forget"](
            ack=AsyncMock(), command={"channel_id": "C001", "text": "1"}, respond=respond
        )

        assert "エラー" in respond.call_args.kwargs["text"]
