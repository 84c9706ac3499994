"""SQLite implementation of MemoryRepository."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import datetime, timezone

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from hibiki.domain.entities import MemoryNote
from hibiki.infrastructure.persistence.models import MemoryNoteModel, as_utc


class SQLiteMemoryRepository:
    """SQLite 版 MemoryRepository 実装

    メモは追加と削除のみ。取得は新しい順。
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

    async def add(self, chat_id: str, content: str) -> MemoryNote:
        """メモを追加する

        Args:
            chat_id: チャット ID
            content: メモ本文

        Returns:
            保存されたメモ
        """
        async with self._session_factory() as session:
            model = MemoryNoteModel(
                chat_id=chat_id,
                content=content,
                created_at=datetime.now(timezone.utc),
            )
            session.add(model)
            await session.commit()
            await session.refresh(model)
            return self._to_entity(model)

    async def find_recent(self, chat_id: str, limit: int = 50) -> list[MemoryNote]:
        """直近のメモを新しい順に取得"""
        async with self._session_factory() as session:
            stmt = (
                select(MemoryNoteModel)
                .where(MemoryNoteModel.chat_id == chat_id)
                .order_by(
                    MemoryNoteModel.created_at.desc(),  # type: ignore[union-attr]
                    MemoryNoteModel.id.desc(),  # type: ignore[union-attr]
                )
                .limit(limit)
            )
            result = await session.exec(stmt)
            return [self._to_entity(row) for row in result.all()]

    async def delete(self, chat_id: str, memory_id: int) -> bool:
        """チャットが所有するメモを削除"""
        async with self._session_factory() as session:
            stmt = delete(MemoryNoteModel).where(
                MemoryNoteModel.id == memory_id,  # type: ignore[arg-type]
                MemoryNoteModel.chat_id == chat_id,  # type: ignore[arg-type]
            )
            result = await session.execute(stmt)
            await session.commit()
            return result.rowcount > 0  # type: ignore[union-attr]

    async def delete_by_chat(self, chat_id: str) -> int:
        """チャットの全メモを削除"""
        async with self._session_factory() as session:
            stmt = delete(MemoryNoteModel).where(
                MemoryNoteModel.chat_id == chat_id  # type: ignore[arg-type]
            )
            result = await session.execute(stmt)
            await session.commit()
            return result.rowcount  # type: ignore[union-attr]

    def _to_entity(self, model: MemoryNoteModel) -> MemoryNote:
        assert model.id is not None
        return MemoryNote(
            id=model.id,
            chat_id=model.chat_id,
            content=model.content,
            created_at=as_utc(model.created_at),
        )
