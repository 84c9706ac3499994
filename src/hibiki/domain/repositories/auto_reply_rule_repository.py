"""AutoReplyRuleRepository Protocol."""

from typing import Protocol

from hibiki.domain.entities.auto_reply_rule import AutoReplyRule


class AutoReplyRuleRepository(Protocol):
    """自動返信ルールリポジトリ"""

    async def add(self, rule: AutoReplyRule) -> AutoReplyRule:
        """ルールを新規保存する

        Args:
            rule: 保存するルール（id は無視される）

        Returns:
            採番された id を持つルール
        """
        ...

    async def find_by_id(self, rule_id: int) -> AutoReplyRule | None:
        """ID でルールを検索

        Args:
            rule_id: ルール ID

        Returns:
            見つかったルール、または None
        """
        ...

    async def find_by_chat(self, chat_id: str) -> list[AutoReplyRule]:
        """チャットの全ルールを保存順に取得

        Args:
            chat_id: チャット ID

        Returns:
            ルールのリスト（id 昇順）
        """
        ...

    async def delete(self, chat_id: str, rule_id: int) -> bool:
        """チャットが所有するルールを削除

        Args:
            chat_id: チャット ID
            rule_id: ルール ID

        Returns:
            削除した場合 True
        """
        ...

    async def delete_by_chat(self, chat_id: str) -> int:
        """チャットの全ルールを削除

        Args:
            chat_id: チャット ID

        Returns:
            削除件数
        """
        ...
