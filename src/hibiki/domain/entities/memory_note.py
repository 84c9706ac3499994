"""MemoryNote entity."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class MemoryNote:
    """チャット単位で覚えておくメモ

    Attributes:
        id: メモ ID
        chat_id: 所有チャット ID
        content: メモ本文
        created_at: 作成日時
    """

    id: int
    chat_id: str
    content: str
    created_at: datetime
