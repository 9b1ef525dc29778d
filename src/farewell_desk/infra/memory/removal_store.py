"""In-memory removal store for farewell_desk.

This module provides the workflow store that holds removal records for a
single session, applies partial updates and fans out the status-change
notifications of the removal workflow.
"""

from collections.abc import Callable
from datetime import datetime, timedelta

from farewell_desk.interfaces.removal_store import RemovalStoreInterface
from farewell_desk.logging import get_logger
from farewell_desk.models.actor import Role
from farewell_desk.models.removal import (
    Removal,
    RemovalHistoryEntry,
    RemovalPatch,
    RemovalStatus,
)
from farewell_desk.services.notification_router import NotificationRouter
from farewell_desk.utils.ids import format_removal_code

__all__ = [
    "InMemoryRemovalStore",
]

logger = get_logger(__name__)

_SCHEDULED_FORMAT = "%Y-%m-%d %H:%M"


class InMemoryRemovalStore(RemovalStoreInterface):
    """In-memory implementation of RemovalStoreInterface.

    Removals are kept newest first. Every status change applied through
    `update_removal` publishes the workflow notification for that status.
    """

    def __init__(
        self,
        router: NotificationRouter,
        removals: list[Removal] | None = None,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the store.

        Args:
            router: Notification router for workflow fan-out
            removals: Initial removals, newest first
            clock: Source of "now" for automatic history entries
        """
        self._router = router
        self._removals: list[Removal] = list(removals or [])
        self._codes_issued = 0
        self._clock = clock

    # === RemovalStoreInterface ===

    async def get_removal(self, code: str) -> Removal | None:
        for removal in self._removals:
            if removal.code == code:
                return removal
        return None

    async def list_removals(self) -> list[Removal]:
        return list(self._removals)

    async def update_removal(self, code: str, patch: RemovalPatch) -> Removal | None:
        for index, original in enumerate(self._removals):
            if original.code == code:
                break
        else:
            logger.warning("removal_update_unknown_code", removal_code=code)
            return None

        updates: dict[str, object] = patch.field_updates()
        if patch.append_history:
            updates["history"] = original.history + patch.append_history
        updated = original.model_copy(update=updates)
        self._removals[index] = updated

        if patch.status is not None:
            self._notify_status_change(updated)

        logger.debug(
            "removal_updated",
            removal_code=code,
            status=updated.status,
            history_appended=len(patch.append_history),
        )
        return updated

    # === WORKFLOW ===

    def add_removal(self, removal: Removal) -> Removal:
        """Register a new removal request and alert the receptors."""
        self._removals.insert(0, removal)
        self._router.publish(
            f'New removal requested "{removal.code}".',
            recipient_role=Role.RECEPTOR,
        )
        logger.info("removal_added", removal_code=removal.code)
        return removal

    def generate_code(self) -> str:
        """Issue the next unused removal code."""
        existing = {r.code for r in self._removals}
        while True:
            self._codes_issued += 1
            code = format_removal_code(self._codes_issued)
            if code not in existing:
                return code

    def by_status(self, status: RemovalStatus) -> list[Removal]:
        return [r for r in self._removals if r.status == status]

    def by_owner(self, owner_id: str) -> list[Removal]:
        return [r for r in self._removals if r.created_by_id == owner_id]

    async def promote_due_requests(
        self,
        now: datetime | None = None,
        window_minutes: int = 10,
    ) -> list[str]:
        """Turn scheduled pickups whose time just arrived into live requests.

        A removal in SCHEDULED status whose scheduled date and time passed
        at most `window_minutes` ago goes back to REQUESTED, so the
        receptors dispatch it like any immediate request.

        Returns:
            Codes of promoted removals
        """
        now = now or self._clock()
        window = timedelta(minutes=window_minutes)
        promoted: list[str] = []

        for removal in list(self._removals):
            if removal.status != RemovalStatus.SCHEDULED:
                continue
            if not removal.scheduled_date or not removal.scheduled_time:
                continue
            try:
                scheduled_at = datetime.strptime(
                    f"{removal.scheduled_date} {removal.scheduled_time}",
                    _SCHEDULED_FORMAT,
                )
            except ValueError as e:
                logger.warning(
                    "removal_schedule_unparseable",
                    removal_code=removal.code,
                    error=str(e),
                )
                continue

            if not scheduled_at < now <= scheduled_at + window:
                continue

            entry = RemovalHistoryEntry(
                date=now,
                action="Status changed automatically from scheduled to requested",
                user="System",
            )
            await self.update_removal(
                removal.code,
                RemovalPatch(status=RemovalStatus.REQUESTED, append_history=(entry,)),
            )
            self._router.publish(
                f"Scheduled removal {removal.code} is now an active request.",
                recipient_role=Role.RECEPTOR,
            )
            promoted.append(removal.code)

        if promoted:
            logger.info("scheduled_requests_promoted", codes=promoted)
        return promoted

    def _notify_status_change(self, removal: Removal) -> None:
        code = removal.code
        status = removal.status
        if status == RemovalStatus.IN_PROGRESS:
            if removal.assigned_driver is not None:
                self._router.publish(
                    f"New removal assigned to you: {code}.",
                    recipient_id=removal.assigned_driver.id,
                )
        elif status == RemovalStatus.EN_ROUTE:
            self._router.publish(
                f"The driver is on the way for your request {code}.",
                recipient_id=removal.created_by_id,
            )
        elif status == RemovalStatus.COMPLETED:
            self._router.publish(
                f"Removal {code} is ready for operational review.",
                recipient_role=Role.OPERATIONS,
            )
        elif status == RemovalStatus.AWAITING_JUNIOR_FINANCE:
            self._router.publish(
                f"Removal {code} awaiting financial review.",
                recipient_role=Role.JUNIOR_FINANCE,
            )
