"""SQLModel table definitions."""

from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """SQLite から読んだ naive な日時を UTC として扱う"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class AutoReplyRuleModel(SQLModel, table=True):
    """自動返信ルールテーブル"""

    __tablename__ = "auto_reply_rules"

    id: int | None = Field(default=None, primary_key=True)
    chat_id: str = Field(index=True)
    pattern: str
    template: str
    created_at: datetime = Field(default_factory=_utcnow)


class MemoryNoteModel(SQLModel, table=True):
    """メモテーブル"""

    __tablename__ = "memories"

    id: int | None = Field(default=None, primary_key=True)
    chat_id: str = Field(index=True)
    content: str
    created_at: datetime = Field(default_factory=_utcnow, index=True)


class ChatPromptModel(SQLModel, table=True):
    """チャットごとのシステムプロンプトテーブル"""

    __tablename__ = "chat_prompts"

    chat_id: str = Field(primary_key=True)
    prompt: str
    updated_at: datetime = Field(default_factory=_utcnow)


class ChatSettingModel(SQLModel, table=True):
    """チャットごとのキー・バリュー設定テーブル"""

    __tablename__ = "chat_settings"

    id: int | None = Field(default=None, primary_key=True)
    chat_id: str = Field(index=True)
    key: str
    value: str
    updated_at: datetime = Field(default_factory=_utcnow)

    __table_args__ = (UniqueConstraint("chat_id", "key", name="uq_chat_setting"),)
