"""SQLite engine and session management."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

# テーブル定義を SQLModel.metadata に登録する
from hibiki.infrastructure.persistence import models as _models  # noqa: F401

logger = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"
BUSY_TIMEOUT_MS = 5000


def _apply_file_pragmas(dbapi_connection: Any, _record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute(f"PRAGMA busy_timeout={BUSY_TIMEOUT_MS}")
    cursor.close()


class DatabaseManager:
    """ルール・メモ・チャット設定を保存する SQLite の管理

    ファイル DB は WAL モードで開き、同時書き込みはロック待ちで直列化する。
    ":memory:" はテスト用で、単一接続を共有する。
    """

    def __init__(self, database_path: str) -> None:
        """初期化

        Args:
            database_path: SQLite ファイルのパス、または ":memory:"
        """
        self._database_path = database_path
        self._engine: AsyncEngine | None = None
        self._sessions: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_file_database(self) -> bool:
        return self._database_path != MEMORY_DATABASE

    def _connect(self) -> async_sessionmaker[AsyncSession]:
        if self._sessions is not None:
            return self._sessions

        if self.is_file_database:
            Path(self._database_path).parent.mkdir(parents=True, exist_ok=True)
        engine = create_async_engine(f"sqlite+aiosqlite:///{self._database_path}")
        if self.is_file_database:
            event.listen(engine.sync_engine, "connect", _apply_file_pragmas)

        self._engine = engine
        self._sessions = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False
        )
        return self._sessions

    async def create_tables(self) -> None:
        """未作成のテーブルを作成する"""
        self._connect()
        assert self._engine is not None
        async with self._engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Database ready: %s", self._database_path)

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """リポジトリ用のセッションを開く"""
        sessions = self._connect()
        async with sessions() as session:
            yield session

    async def close(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._sessions = None
        logger.info("Database closed: %s", self._database_path)
