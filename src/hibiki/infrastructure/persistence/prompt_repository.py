"""SQLite implementation of PromptRepository."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import datetime, timezone

from sqlmodel.ext.asyncio.session import AsyncSession

from hibiki.infrastructure.persistence.models import ChatPromptModel


class SQLitePromptRepository:
    """SQLite 版 PromptRepository 実装（1 チャット 1 行）"""

    def __init__(
        self,
        session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]],
    ) -> None:
        self._session_factory = session_factory

    async def get(self, chat_id: str) -> str | None:
        """チャットのプロンプトを取得。未設定なら None"""
        async with self._session_factory() as session:
            model = await session.get(ChatPromptModel, chat_id)
            return model.prompt if model is not None else None

    async def set(self, chat_id: str, prompt: str) -> None:
        """プロンプトを丸ごと置き換える"""
        async with self._session_factory() as session:
            model = ChatPromptModel(
                chat_id=chat_id,
                prompt=prompt,
                updated_at=datetime.now(timezone.utc),
            )
            await session.merge(model)
            await session.commit()

    async def reset(self, chat_id: str) -> None:
        """プロンプトを削除してデフォルトに戻す"""
        async with self._session_factory() as session:
            model = await session.get(ChatPromptModel, chat_id)
            if model is not None:
                await session.delete(model)
                await session.commit()
