"""Tests for SQLiteMemoryRepository."""

import pytest

from hibiki.infrastructure.persistence import DatabaseManager, SQLiteMemoryRepository


@pytest.fixture
def repository(db_manager: DatabaseManager) -> SQLiteMemoryRepository:
    return SQLiteMemoryRepository(db_manager.get_session)


class TestSQLiteMemoryRepository:
    """SQLiteMemoryRepository のテスト"""

    async def test_add(self, repository) -> None:
        note = await repository.add("C001", "牛乳を買う")

        assert note.id is not None
        assert note.chat_id == "C001"
        assert note.content == "牛乳を買う"

    async def test_find_recent_newest_first(self, repository) -> None:
        for content in ("a", "b", "c"):
            await repository.add("C001", content)
        await repository.add("C002", "other")

        notes = await repository.find_recent("C001")

        assert [n.content for n in notes] == ["c", "b", "a"]

    async def test_find_recent_limit(self, repository) -> None:
        for content in ("a", "b", "c"):
            await repository.add("C001", content)

        notes = await repository.find_recent("C001", limit=2)

        assert [n.content for n in notes] == ["c", "b"]

    async def test_delete_scoped_to_chat(self, repository) -> None:
        note = await repository.add("C001", "a")

        assert await repository.delete("C002", note.id) is False
        assert await repository.delete("C001", note.id) is True
        assert await repository.find_recent("C001") == []

    async def test_delete_by_chat(self, repository) -> None:
        await repository.add("C001", "a")
        await repository.add("C001", "b")

        assert await repository.delete_by_chat("C001") == 2
        assert await repository.delete_by_chat("C001") == 0
