"""FarewellDesk orchestrator for the coordination layer.

This module provides the main entry point for the farewell_desk package,
wiring the scheduling, chat and notification engines to their collaborators
and running the background sweeps.
"""

import asyncio
from collections.abc import Callable
from datetime import datetime
from typing import Any

from farewell_desk.config import FarewellDeskConfig
from farewell_desk.infra.asyncio_scheduler import AsyncioTaskScheduler
from farewell_desk.interfaces.attachments import AttachmentProviderInterface
from farewell_desk.interfaces.identity import IdentityInterface
from farewell_desk.interfaces.removal_store import (
    RemovalStoreInterface,
    RequestPromoterInterface,
)
from farewell_desk.interfaces.scheduler import TaskSchedulerInterface
from farewell_desk.logging import get_logger
from farewell_desk.services.chat_session import ChatSessionEngine
from farewell_desk.services.farewell_scheduler import FarewellScheduler
from farewell_desk.services.notification_router import NotificationRouter

__all__ = ["FarewellDesk"]

logger = get_logger(__name__)


class FarewellDesk:
    """Main orchestrator of the farewell_desk coordination layer.

    The removal store receives the shared notification router through
    `store_factory`, so workflow notifications and engine notifications end
    up in the same place. Config is loaded from .env unless given.

    Example:
        async with FarewellDesk(
            store_factory=InMemoryRemovalStore,
            identity=SessionIdentity(),
            attachments=InMemoryAttachmentProvider(),
        ) as desk:
            desk.scheduler.book("2024-06-03-11:00", removal)
            await desk.scheduler.commit()
            desk.chat.send(None, "Hello")
    """

    def __init__(
        self,
        store_factory: Callable[[NotificationRouter], RemovalStoreInterface],
        identity: IdentityInterface,
        attachments: AttachmentProviderInterface,
        *,
        config: FarewellDeskConfig | None = None,
        task_scheduler: TaskSchedulerInterface | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize FarewellDesk and wire its engines.

        Args:
            store_factory: Builds the removal store from the shared router
            identity: Source of the current actor
            attachments: Attachment handle provider
            config: Settings (default: loaded from environment / .env)
            task_scheduler: Timer backend (default: the running asyncio loop)
            clock: Source of "now" for every engine
        """
        self._config = config or FarewellDeskConfig()
        self._identity = identity

        self.router = NotificationRouter(
            retention_limit=self._config.notifications.retention_limit,
            clock=clock,
        )
        self.store = store_factory(self.router)
        self.scheduler = FarewellScheduler(
            self.store,
            self.router,
            identity,
            release_grace_minutes=self._config.agenda.release_grace_minutes,
            sweep_interval_seconds=self._config.agenda.sweep_interval_seconds,
            clock=clock,
        )
        self.chat = ChatSessionEngine(
            identity,
            attachments,
            task_scheduler or AsyncioTaskScheduler(),
            self.router,
            settings=self._config.chat,
            clock=clock,
        )

        self._stop_event: asyncio.Event | None = None
        self._background: list[asyncio.Task[None]] = []
        self._running = False

    async def start(self) -> None:
        """Start the background loops and accept chat traffic again."""
        if self._running:
            return

        self.chat.resume()
        self._stop_event = asyncio.Event()
        self._background.append(
            asyncio.create_task(
                self.scheduler.run_auto_release(self._stop_event),
                name="farewell-auto-release",
            )
        )
        if isinstance(self.store, RequestPromoterInterface):
            self._background.append(
                asyncio.create_task(
                    self._run_request_promotion(self.store, self._stop_event),
                    name="removal-request-promotion",
                )
            )

        self._running = True
        logger.info("farewell_desk_started", background_tasks=len(self._background))

    async def stop(self) -> None:
        """Stop background loops and release every chat resource."""
        if self._stop_event is not None:
            self._stop_event.set()
        if self._background:
            results = await asyncio.gather(*self._background, return_exceptions=True)
            for result in results:
                if isinstance(result, BaseException):
                    logger.error("background_task_failed", error=str(result))
        self._background = []
        self._stop_event = None

        self.chat.shutdown()
        self._running = False
        logger.info("farewell_desk_stopped")

    async def __aenter__(self) -> "FarewellDesk":
        """Async context manager entry - starts background loops."""
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Async context manager exit - stops loops and tears down chats."""
        await self.stop()

    async def _run_request_promotion(
        self,
        store: RequestPromoterInterface,
        stop_event: asyncio.Event,
    ) -> None:
        interval = self._config.agenda.sweep_interval_seconds
        window = self._config.agenda.request_promotion_window_minutes
        while not stop_event.is_set():
            try:
                await store.promote_due_requests(window_minutes=window)
            except Exception as e:
                logger.error("request_promotion_failed", error=str(e))
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=interval)
            except TimeoutError:
                continue

    # === CONVENIENCE ===

    @property
    def is_running(self) -> bool:
        return self._running

    def unread_notifications(self) -> int:
        """Unread notification count for the current actor."""
        return self.router.unread_count(self._identity.current())

    def mark_notifications_read(self) -> int:
        """Mark every notification of the current actor as read."""
        return self.router.mark_all_read_for(self._identity.current())
