"""MemoryRepository Protocol."""

from typing import Protocol

from hibiki.domain.entities.memory_note import MemoryNote


class MemoryRepository(Protocol):
    """メモリポジトリ"""

    async def add(self, chat_id: str, content: str) -> MemoryNote:
        """メモを追加する

        Args:
            chat_id: チャット ID
            content: メモ本文

        Returns:
            保存されたメモ
        """
        ...

    async def find_recent(self, chat_id: str, limit: int = 50) -> list[MemoryNote]:
        """直近のメモを新しい順に取得

        Args:
            chat_id: チャット ID
            limit: 取得する最大件数

        Returns:
            メモのリスト
        """
        ...

    async def delete(self, chat_id: str, memory_id: int) -> bool:
        """チャットが所有するメモを削除

        Returns:
            削除した場合 True
        """
        ...

    async def delete_by_chat(self, chat_id: str) -> int:
        """チャットの全メモを削除

        Returns:
            削除件数
        """
        ...
