"""ChatSettingRepository Protocol."""

from typing import Protocol


class ChatSettingRepository(Protocol):
    """チャット別キー・バリュー設定のリポジトリ"""

    async def get(self, chat_id: str, key: str) -> str | None:
        """設定値を取得

        Returns:
            値、未設定なら None
        """
        ...

    async def set(self, chat_id: str, key: str, value: str) -> None:
        """設定値を置き換える"""
        ...

    async def delete(self, chat_id: str, key: str) -> bool:
        """設定値を削除

        Returns:
            削除した場合 True
        """
        ...

    async def list(self, chat_id: str) -> dict[str, str]:
        """チャットの全設定を取得

        Returns:
            キー昇順の dict
        """
        ...
