"""Shared test fixtures."""

from collections.abc import AsyncGenerator
from datetime import datetime, timezone

import pytest

from hibiki.domain.entities import Message, User
from hibiki.infrastructure.persistence import DatabaseManager


@pytest.fixture
def alice() -> User:
    """Create a user with a handle."""
    return User(id="U001", name="alice", display_name="Alice")


@pytest.fixture
def timestamp() -> datetime:
    """Create a fixed timestamp."""
    return datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_message(alice: User, timestamp: datetime):
    """Factory for messages in chat C001."""

    def _make(
        text: str = "hello",
        *,
        id: str = "1700000000.000100",
        chat_id: str = "C001",
        user: User | None = alice,
        **kwargs,
    ) -> Message:
        return Message(
            id=id,
            chat_id=chat_id,
            user=user,
            text=text,
            timestamp=timestamp,
            **kwargs,
        )

    return _make


@pytest.fixture
async def db_manager() -> AsyncGenerator[DatabaseManager, None]:
    """In-memory database with all tables created."""
    manager = DatabaseManager(":memory:")
    await manager.create_tables()
    yield manager
    await manager.close()
