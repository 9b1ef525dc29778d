"""asyncio-backed task scheduler for farewell_desk."""

import asyncio
from collections.abc import Callable

from farewell_desk.interfaces.scheduler import ScheduledTask

__all__ = [
    "AsyncioTaskScheduler",
]


class AsyncioTaskScheduler:
    """Schedules engine timers on an asyncio event loop.

    The loop is resolved lazily so the scheduler can be built outside a
    running loop and used once one is running.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)
