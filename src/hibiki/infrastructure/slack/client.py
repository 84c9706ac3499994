"""Socket Mode connection for the Slack app."""

import asyncio
import logging

from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler
from slack_bolt.async_app import AsyncApp

from hibiki.config import SlackConfig

logger = logging.getLogger(__name__)


class SlackConnection:
    """Bolt アプリと Socket Mode 接続をまとめて扱う

    ハンドラ登録は ``app`` に対して行い、``serve()`` で停止要求まで接続を保つ。
    """

    def __init__(self, app: AsyncApp, app_token: str) -> None:
        self.app = app
        self._app_token = app_token
        self._handler: AsyncSocketModeHandler | None = None

    @classmethod
    def from_config(cls, config: SlackConfig) -> "SlackConnection":
        return cls(AsyncApp(token=config.bot_token), config.app_token)

    async def serve(self, stop_event: asyncio.Event, close_timeout: float = 5.0) -> bool:
        """接続し、stop_event がセットされたら切断する

        Args:
            stop_event: 停止要求
            close_timeout: 切断を待つ最大秒数

        Returns:
            時間内に切断できたら True
        """
        self._handler = AsyncSocketModeHandler(self.app, self._app_token)
        await self._handler.connect_async()
        logger.info("Connected to Slack via Socket Mode")

        await stop_event.wait()
        return await self.close(close_timeout)

    async def close(self, timeout: float = 5.0) -> bool:
        if self._handler is None:
            return True
        try:
            await asyncio.wait_for(self._handler.close_async(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("Socket Mode handler did not close within %.1fs", timeout)
            return False
        finally:
            self._handler = None
        return True
