"""farewell_desk - Coordination layer for a pet removal and cremation service.

This package provides the stateful engines behind the service's workflow:
- Farewell calendar with staged bookings, batch commit and auto-release
- Client/receptor chat with inactivity timeout and automated replies
- Role- and user-scoped notifications

Example usage:
    from farewell_desk import (
        FarewellDesk,
        InMemoryAttachmentProvider,
        InMemoryRemovalStore,
        SessionIdentity,
    )

    identity = SessionIdentity()
    async with FarewellDesk(
        store_factory=InMemoryRemovalStore,
        identity=identity,
        attachments=InMemoryAttachmentProvider(),
    ) as desk:
        identity.sign_in(junior_finance_user)
        desk.scheduler.book("2024-06-03-11:00", removal)
        result = await desk.scheduler.commit()
"""

__version__ = "0.1.0"

from farewell_desk.infra.asyncio_scheduler import AsyncioTaskScheduler
from farewell_desk.infra.memory.attachments import InMemoryAttachmentProvider
from farewell_desk.infra.memory.identity import SessionIdentity
from farewell_desk.infra.memory.removal_store import InMemoryRemovalStore
from farewell_desk.interfaces.attachments import AttachmentProviderInterface
from farewell_desk.interfaces.identity import IdentityInterface
from farewell_desk.interfaces.removal_store import (
    RemovalStoreInterface,
    RequestPromoterInterface,
)
from farewell_desk.interfaces.scheduler import ScheduledTask, TaskSchedulerInterface
from farewell_desk.orchestrator import FarewellDesk
from farewell_desk.services.chat_session import ChatSessionEngine
from farewell_desk.services.farewell_scheduler import (
    CommitResult,
    FarewellScheduler,
    SweepResult,
)
from farewell_desk.services.notification_router import NotificationRouter

__all__ = [  # noqa: RUF022
    # Orchestrator
    "FarewellDesk",
    # Engines
    "ChatSessionEngine",
    "CommitResult",
    "FarewellScheduler",
    "NotificationRouter",
    "SweepResult",
    # Implementations
    "AsyncioTaskScheduler",
    "InMemoryAttachmentProvider",
    "InMemoryRemovalStore",
    "SessionIdentity",
    # Interfaces
    "AttachmentProviderInterface",
    "IdentityInterface",
    "RemovalStoreInterface",
    "RequestPromoterInterface",
    "ScheduledTask",
    "TaskSchedulerInterface",
]
