"""SQLite implementation of AutoReplyRuleRepository."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from hibiki.domain.entities import AutoReplyRule
from hibiki.infrastructure.persistence.models import AutoReplyRuleModel, as_utc


class SQLiteAutoReplyRuleRepository:
    """SQLite 版 AutoReplyRuleRepository 実装

    ルールは追加と削除のみで、更新はしない。
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

    async def add(self, rule: AutoReplyRule) -> AutoReplyRule:
        """ルールを追加し、採番済みのルールを返す"""
        async with self._session_factory() as session:
            model = AutoReplyRuleModel(
                chat_id=rule.chat_id,
                pattern=rule.pattern,
                template=rule.template,
                created_at=rule.created_at,
            )
            session.add(model)
            await session.commit()
            await session.refresh(model)
            return self._to_entity(model)

    async def find_by_id(self, rule_id: int) -> AutoReplyRule | None:
        """ID でルールを検索"""
        async with self._session_factory() as session:
            model = await session.get(AutoReplyRuleModel, rule_id)
            if model is None:
                return None
            return self._to_entity(model)

    async def find_by_chat(self, chat_id: str) -> list[AutoReplyRule]:
        """チャットのルールを保存順に取得"""
        async with self._session_factory() as session:
            stmt = (
                select(AutoReplyRuleModel)
                .where(AutoReplyRuleModel.chat_id == chat_id)
                .order_by(AutoReplyRuleModel.id)  # type: ignore[arg-type]
            )
            result = await session.exec(stmt)
            return [self._to_entity(row) for row in result.all()]

    async def delete(self, chat_id: str, rule_id: int) -> bool:
        """チャットが所有するルールを削除"""
        async with self._session_factory() as session:
            stmt = delete(AutoReplyRuleModel).where(
                AutoReplyRuleModel.id == rule_id,  # type: ignore[arg-type]
                AutoReplyRuleModel.chat_id == chat_id,  # type: ignore[arg-type]
            )
            result = await session.execute(stmt)
            await session.commit()
            return result.rowcount > 0  # type: ignore[union-attr]

    async def delete_by_chat(self, chat_id: str) -> int:
        """チャットの全ルールを削除"""
        async with self._session_factory() as session:
            stmt = delete(AutoReplyRuleModel).where(
                AutoReplyRuleModel.chat_id == chat_id  # type: ignore[arg-type]
            )
            result = await session.execute(stmt)
            await session.commit()
            return result.rowcount  # type: ignore[union-attr]

    def _to_entity(self, model: AutoReplyRuleModel) -> AutoReplyRule:
        return AutoReplyRule(
            id=model.id,
            chat_id=model.chat_id,
            pattern=model.pattern,
            template=model.template,
            created_at=as_utc(model.created_at),
        )
