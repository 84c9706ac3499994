"""One-shot delayed callbacks on the running asyncio loop."""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field

from hibiki.domain.services import ScheduledCallback

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskHandle:
    """Handle of a scheduled callback."""

    id: str = field(default_factory=lambda: uuid.uuid4().hex)


class AsyncioScheduler:
    """Scheduler that runs each callback in its own asyncio task.

    Callbacks are not persisted and there is no cap on the number of pending
    callbacks. Failures of a callback are logged and never affect others.
    """

    def __init__(self) -> None:
        """Initialize the scheduler."""
        self._tasks: dict[str, asyncio.Task[None]] = {}

    def register(self, delay_ms: float, callback: ScheduledCallback) -> TaskHandle:
        """Run a callback once after a delay.

        Must be called from within a running event loop.

        Args:
            delay_ms: Delay in milliseconds.
            callback: Async callable to run.

        Returns:
            Handle usable with cancel().
        """
        handle = TaskHandle()
        task = asyncio.create_task(self._fire(handle, max(delay_ms, 0) / 1000, callback))
        self._tasks[handle.id] = task
        logger.debug("Registered callback %s (delay=%.0fms)", handle.id, delay_ms)
        return handle

    def cancel(self, handle: TaskHandle) -> bool:
        """Cancel a pending callback.

        Args:
            handle: Handle returned by register().

        Returns:
            True if the callback had not fired yet.
        """
        task = self._tasks.pop(handle.id, None)
        if task is None or task.done():
            return False
        task.cancel()
        logger.debug("Cancelled callback %s", handle.id)
        return True

    @property
    def pending_count(self) -> int:
        """Number of callbacks that have not fired yet."""
        return len(self._tasks)

    async def shutdown(self) -> None:
        """Cancel every pending callback and wait for the tasks to finish."""
        tasks = list(self._tasks.values())
        self._tasks.clear()
        if not tasks:
            return

        logger.info("Cancelling %d pending callback(s)", len(tasks))
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def _fire(
        self, handle: TaskHandle, delay: float, callback: ScheduledCallback
    ) -> None:
        """Sleep, then run the callback."""
        try:
            await asyncio.sleep(delay)
            # Once fired the handle can no longer be cancelled
            self._tasks.pop(handle.id, None)
            await callback()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Scheduled callback %s failed", handle.id)
        finally:
            self._tasks.pop(handle.id, None)
