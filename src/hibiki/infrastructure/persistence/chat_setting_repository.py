"""SQLite implementation of ChatSettingRepository."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import datetime, timezone

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from hibiki.infrastructure.persistence.models import ChatSettingModel


class SQLiteChatSettingRepository:
    """SQLite 版 ChatSettingRepository 実装

    (chat_id, key) ごとに 1 行のキー・バリュー設定を保持する。
    """

    def __init__(
        self,
        session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]],
    ) -> None:
        """初期化

        Args:
            session_factory: 非同期セッション生成関数
        """
        self._session_factory = session_factory

    async def get(self, chat_id: str, key: str) -> str | None:
        """設定値を取得。未設定なら None"""
        async with self._session_factory() as session:
            model = await self._find(session, chat_id, key)
            return model.value if model is not None else None

    async def set(self, chat_id: str, key: str, value: str) -> None:
        """設定値を保存（upsert）"""
        async with self._session_factory() as session:
            model = await self._find(session, chat_id, key)
            if model is None:
                model = ChatSettingModel(chat_id=chat_id, key=key, value=value)
            else:
                model.value = value
                model.updated_at = datetime.now(timezone.utc)
            session.add(model)
            await session.commit()

    async def delete(self, chat_id: str, key: str) -> bool:
        """設定値を削除

        Returns:
            削除した場合 True
        """
        async with self._session_factory() as session:
            model = await self._find(session, chat_id, key)
            if model is None:
                return False
            await session.delete(model)
            await session.commit()
            return True

    async def list(self, chat_id: str) -> dict[str, str]:
        """チャットの全設定をキー順に取得"""
        async with self._session_factory() as session:
            stmt = (
                select(ChatSettingModel)
                .where(ChatSettingModel.chat_id == chat_id)
                .order_by(ChatSettingModel.key)  # type: ignore[arg-type]
            )
            result = await session.exec(stmt)
            return {row.key: row.value for row in result.all()}

    async def _find(
        self, session: AsyncSession, chat_id: str, key: str
    ) -> ChatSettingModel | None:
        stmt = select(ChatSettingModel).where(
            ChatSettingModel.chat_id == chat_id,
            ChatSettingModel.key == key,
        )
        result = await session.exec(stmt)
        return result.first()
