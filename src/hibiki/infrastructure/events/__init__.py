"""Event scheduling infrastructure."""

from hibiki.infrastructure.events.scheduler import AsyncioScheduler, TaskHandle

__all__ = ["AsyncioScheduler", "TaskHandle"]
