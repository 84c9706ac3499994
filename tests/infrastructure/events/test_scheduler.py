"""Tests for AsyncioScheduler."""

import asyncio

import pytest

from hibiki.infrastructure.events import AsyncioScheduler


@pytest.fixture
async def scheduler():
    scheduler = AsyncioScheduler()
    yield scheduler
    await scheduler.shutdown()


class TestAsyncioScheduler:
    """AsyncioScheduler のテスト"""

    async def test_fires_once(self, scheduler) -> None:
        calls: list[str] = []

        async def callback() -> None:
            calls.append("fired")

        scheduler.register(10, callback)
        assert scheduler.pending_count == 1

        await asyncio.sleep(0.1)

        assert calls == ["fired"]
        assert scheduler.pending_count == 0

    async def test_cancel_before_fire(self, scheduler) -> None:
        calls: list[str] = []

        async def callback() -> None:
            calls.append("fired")

        handle = scheduler.register(50, callback)
        assert scheduler.cancel(handle) is True
        await asyncio.sleep(0.1)

        assert calls == []
        assert scheduler.cancel(handle) is False

    async def test_failure_does_not_affect_others(self, scheduler) -> None:
        calls: list[str] = []

        async def broken() -> None:
            raise RuntimeError("boom")

        async def callback() -> None:
            calls.append("fired")

        scheduler.register(10, broken)
        scheduler.register(20, callback)
        await asyncio.sleep(0.1)

        assert calls == ["fired"]

    async def test_handles_are_unique(self, scheduler) -> None:
        async def callback() -> None:
            pass

        first = scheduler.register(1000, callback)
        second = scheduler.register(1000, callback)
        assert first.id != second.id

    async def test_shutdown_cancels_pending(self) -> None:
        scheduler = AsyncioScheduler()
        calls: list[str] = []

        async def callback() -> None:
            calls.append("fired")

        scheduler.register(1000, callback)
        await scheduler.shutdown()
        await asyncio.sleep(0)

        assert calls == []
        assert scheduler.pending_count == 0
