"""PromptRepository Protocol."""

from typing import Protocol


class PromptRepository(Protocol):
    """チャット別システムプロンプトのリポジトリ"""

    async def get(self, chat_id: str) -> str | None:
        """チャットのプロンプトを取得

        Returns:
            設定済みのプロンプト、未設定なら None
        """
        ...

    async def set(self, chat_id: str, prompt: str) -> None:
        """チャットのプロンプトを置き換える"""
        ...

    async def reset(self, chat_id: str) -> None:
        """チャットのプロンプトを削除し、デフォルトに戻す"""
        ...
