"""Task scheduler interface for farewell_desk.

This module defines the Protocols for delayed callbacks. All engine timers
(chat inactivity, closing delay, automated reply) are expressed through
them so tests can drive time explicitly.
"""

from collections.abc import Callable
from typing import Protocol, runtime_checkable

__all__ = [
    "ScheduledTask",
    "TaskSchedulerInterface",
]


@runtime_checkable
class ScheduledTask(Protocol):
    """Cancel token for a pending callback.

    `asyncio.TimerHandle` satisfies this protocol.
    """

    def cancel(self) -> None:
        """Prevent the callback from running. Safe to call more than once."""
        ...

    def cancelled(self) -> bool:
        """Return True if `cancel` was called."""
        ...


@runtime_checkable
class TaskSchedulerInterface(Protocol):
    """Runs callbacks after a delay on the engine's event loop."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        """Schedule `callback` to run once after `delay` seconds.

        Args:
            delay: Delay in seconds
            callback: Zero-argument callable

        Returns:
            Cancel token for the scheduled call
        """
        ...
