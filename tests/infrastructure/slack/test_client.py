"""Tests for SlackConnection."""

import asyncio
from unittest.mock import AsyncMock, Mock, patch

from hibiki.config import SlackConfig
from hibiki.infrastructure.slack.client import SlackConnection


class TestSlackConnection:
    """SlackConnection のテスト"""

    def test_from_config(self) -> None:
        """設定のトークンでアプリを作る"""
        with patch("hibiki.infrastructure.slack.client.AsyncApp") as mock_app_class:
            connection = SlackConnection.from_config(
                SlackConfig(bot_token="xoxb-token", app_token="xapp-token")
            )

        mock_app_class.assert_called_once_with(token="xoxb-token")
        assert connection.app is mock_app_class.return_value

    async def test_close_before_serve(self) -> None:
        """serve() 前の close() は何もしない"""
        connection = SlackConnection(Mock(), "xapp-token")

        assert await connection.close() is True

    async def test_serve_until_stopped(self) -> None:
        """停止要求まで接続し、その後切断する"""
        app = Mock()
        stop_event = asyncio.Event()
        stop_event.set()
        with patch(
            "hibiki.infrastructure.slack.client.AsyncSocketModeHandler"
        ) as mock_handler_class:
            handler = mock_handler_class.return_value
            handler.connect_async = AsyncMock()
            handler.close_async = AsyncMock()
            connection = SlackConnection(app, "xapp-token")

            assert await connection.serve(stop_event) is True

        mock_handler_class.assert_called_once_with(app, "xapp-token")
        handler.connect_async.assert_awaited_once()
        handler.close_async.assert_awaited_once()

    async def test_close_timeout(self) -> None:
        """切断がタイムアウトした場合は False"""
        connection = SlackConnection(Mock(), "xapp-token")

        async def hang() -> None:
            await asyncio.sleep(10)

        mock_handler = Mock()
        mock_handler.close_async = hang
        connection._handler = mock_handler

        assert await connection.close(timeout=0.01) is False
