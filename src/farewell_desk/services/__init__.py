"""Service layer for farewell_desk.

This module exports the coordination engines.
"""

from farewell_desk.services.chat_session import ChatSessionEngine
from farewell_desk.services.farewell_scheduler import (
    AUTOMATIC_ACTOR_NAME,
    CommitResult,
    FarewellScheduler,
    SweepResult,
)
from farewell_desk.services.notification_router import NotificationRouter

__all__ = [
    "AUTOMATIC_ACTOR_NAME",
    "ChatSessionEngine",
    "CommitResult",
    "FarewellScheduler",
    "NotificationRouter",
    "SweepResult",
]
