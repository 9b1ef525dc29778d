"""Farewell scheduling service for farewell_desk.

This module owns the weekly farewell calendar: staged bookings, the batch
commit that advances booked removals in the workflow, and the periodic
sweep that releases bookings whose time has passed.
"""

import asyncio
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from farewell_desk.interfaces.identity import IdentityInterface
from farewell_desk.interfaces.removal_store import RemovalStoreInterface
from farewell_desk.logging import get_logger
from farewell_desk.models.actor import Actor
from farewell_desk.models.removal import (
    Removal,
    RemovalHistoryEntry,
    RemovalPatch,
    RemovalStatus,
    responsible_role,
)
from farewell_desk.models.schedule import parse_slot_key, week_slot_keys
from farewell_desk.services.notification_router import NotificationRouter

__all__ = [
    "AUTOMATIC_ACTOR_NAME",
    "CommitResult",
    "FarewellScheduler",
    "SweepResult",
]

logger = get_logger(__name__)

AUTOMATIC_ACTOR_NAME = "System"

# Status a removal must be in to be booked and committed, and where commit sends it
_BOOKABLE_STATUS = RemovalStatus.AWAITING_JUNIOR_FINANCE
_COMMITTED_STATUS = RemovalStatus.AWAITING_MASTER_SIGNOFF


@dataclass
class CommitResult:
    """Outcome of committing staged bookings."""

    committed: list[str] = field(default_factory=list)
    """Codes of removals advanced to master sign-off."""

    skipped: list[str] = field(default_factory=list)
    """Slot keys whose removal had already left the bookable status."""

    errors: list[str] = field(default_factory=list)


@dataclass
class SweepResult:
    """Outcome of one auto-release sweep."""

    released: list[str] = field(default_factory=list)
    """Slot keys removed from the calendar."""

    errors: list[str] = field(default_factory=list)


class FarewellScheduler:
    """Farewell calendar engine.

    The schedule maps slot keys to removal codes; removals themselves stay
    in the removal store. Bookings are staged as dirty slots so an operator
    can lay out a whole week before any workflow transition happens.

    Example:
        scheduler = FarewellScheduler(store, router, identity)
        scheduler.book("2024-06-03-11:00", removal)
        result = await scheduler.commit()

        # in the background
        await scheduler.run_auto_release(stop_event)
    """

    def __init__(
        self,
        store: RemovalStoreInterface,
        router: NotificationRouter,
        identity: IdentityInterface,
        *,
        release_grace_minutes: int = 30,
        sweep_interval_seconds: float = 60.0,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the scheduler with its collaborators.

        Args:
            store: Workflow removal store
            router: Notification router for workflow fan-out
            identity: Source of the acting user for commits
            release_grace_minutes: How long after its start a slot is released
            sweep_interval_seconds: Pause between sweeps in run_auto_release
            clock: Source of "now" for sweeps and history entries
        """
        self._store = store
        self._router = router
        self._identity = identity
        self._release_grace = timedelta(minutes=release_grace_minutes)
        self._sweep_interval = sweep_interval_seconds
        self._clock = clock

        self._schedule: dict[str, str] = {}
        self._dirty: set[str] = set()
        # Serializes commit and sweep so a removal is never advanced twice
        self._store_lock = asyncio.Lock()

    # === BOOKING ===

    def book(self, slot_key: str, removal: Removal) -> bool:
        """Stage a booking of `removal` in `slot_key`.

        An existing booking in the slot is overwritten. Availability checks
        are the caller's job (see `available_removals`).

        Returns:
            False if the slot key is malformed and nothing was booked
        """
        try:
            parse_slot_key(slot_key)
        except ValueError as e:
            logger.warning("farewell_book_rejected", slot_key=slot_key, error=str(e))
            return False

        previous = self._schedule.get(slot_key)
        self._schedule[slot_key] = removal.code
        self._dirty.add(slot_key)

        logger.info(
            "farewell_booked",
            slot_key=slot_key,
            removal_code=removal.code,
            replaced=previous,
        )
        return True

    def unbook(self, slot_key: str) -> bool:
        """Remove a booking, committed or not.

        Returns:
            True if the slot was booked
        """
        code = self._schedule.pop(slot_key, None)
        self._dirty.discard(slot_key)
        if code is None:
            return False
        logger.info("farewell_unbooked", slot_key=slot_key, removal_code=code)
        return True

    async def commit(self) -> CommitResult:
        """Advance every removal booked since the last commit.

        Each dirty slot whose removal is still awaiting junior finance moves
        to master sign-off with one history entry and one notification.
        Failures are isolated per slot and reported in the result.
        """
        result = CommitResult()
        actor = self._identity.current()
        if actor is None:
            logger.warning("farewell_commit_without_actor", pending=len(self._dirty))
            return result

        async with self._store_lock:
            processed: dict[str, str] = {}
            for slot_key in sorted(self._dirty):
                code = self._schedule.get(slot_key)
                if code is None:
                    continue
                processed[slot_key] = code
                try:
                    advanced = await self._commit_slot(slot_key, code, actor)
                except Exception as e:
                    logger.error(
                        "farewell_commit_failed",
                        slot_key=slot_key,
                        removal_code=code,
                        error=str(e),
                    )
                    result.errors.append(f"Slot '{slot_key}': {e}")
                    continue

                if advanced:
                    result.committed.append(code)
                else:
                    result.skipped.append(slot_key)

            # Keys rebooked to another removal while we awaited stay dirty
            self._dirty = {
                key
                for key in self._dirty
                if key not in processed or self._schedule.get(key) != processed[key]
            }

        logger.info(
            "farewell_commit_completed",
            committed=len(result.committed),
            skipped=len(result.skipped),
            errors=len(result.errors),
        )
        return result

    async def _commit_slot(self, slot_key: str, code: str, actor: Actor) -> bool:
        removal = await self._store.get_removal(code)
        if removal is None:
            raise LookupError(f"Unknown removal '{code}'")
        if removal.status != _BOOKABLE_STATUS:
            logger.debug(
                "farewell_commit_skipped",
                slot_key=slot_key,
                removal_code=code,
                status=removal.status,
            )
            return False

        entry = RemovalHistoryEntry(
            date=self._clock(),
            action=f"Farewell scheduled for {slot_key}; sent to master finance sign-off",
            user=actor.name,
        )
        updated = await self._store.update_removal(
            code,
            RemovalPatch(status=_COMMITTED_STATUS, append_history=(entry,)),
        )
        if updated is None:
            raise LookupError(f"Unknown removal '{code}'")

        role = responsible_role(updated.status)
        if role is not None:
            self._router.publish(
                f"Removal {code} awaiting sign-off with farewell scheduled for {slot_key}.",
                recipient_role=role,
            )
        return True

    # === AUTO-RELEASE ===

    async def sweep(self, now: datetime | None = None) -> SweepResult:
        """Release every timed booking whose grace period has elapsed.

        Emergency fit-in bookings are never released. Expired keys leave
        the schedule in a single replacement after all of them have been
        recorded in the store.

        Args:
            now: Reference time (default: the scheduler clock)
        """
        result = SweepResult()
        async with self._store_lock:
            now = now or self._clock()
            expired = self._find_expired(now)
            if not expired:
                return result

            for slot_key, code in expired.items():
                try:
                    await self._release_slot(slot_key, code, now)
                except Exception as e:
                    logger.error(
                        "farewell_release_failed",
                        slot_key=slot_key,
                        removal_code=code,
                        error=str(e),
                    )
                    result.errors.append(f"Slot '{slot_key}': {e}")
                result.released.append(slot_key)

            # A key rebooked to another removal meanwhile is a new booking
            self._schedule = {
                key: code for key, code in self._schedule.items() if expired.get(key) != code
            }
            self._dirty = {key for key in self._dirty if key in self._schedule}

        logger.info(
            "farewell_sweep_completed",
            released=len(result.released),
            errors=len(result.errors),
        )
        return result

    def _find_expired(self, now: datetime) -> dict[str, str]:
        # Slot keys are local wall-clock times
        if now.tzinfo is not None:
            now = now.astimezone().replace(tzinfo=None)
        expired: dict[str, str] = {}
        for slot_key, code in self._schedule.items():
            try:
                slot = parse_slot_key(slot_key)
            except ValueError as e:
                logger.warning("farewell_slot_unparseable", slot_key=slot_key, error=str(e))
                continue

            scheduled_at = slot.scheduled_datetime
            if scheduled_at is None:
                continue
            if now > scheduled_at + self._release_grace:
                expired[slot_key] = code
        return expired

    async def _release_slot(self, slot_key: str, code: str, now: datetime) -> None:
        entry = RemovalHistoryEntry(
            date=now,
            action=f"Farewell slot {slot_key} expired; returned to release queue",
            user=AUTOMATIC_ACTOR_NAME,
        )
        updated = await self._store.update_removal(code, RemovalPatch(append_history=(entry,)))
        if updated is None:
            raise LookupError(f"Unknown removal '{code}'")

        role = responsible_role(updated.status)
        if role is not None:
            self._router.publish(
                f"Farewell for removal {code} ({slot_key}) expired and was released.",
                recipient_role=role,
            )
        logger.info("farewell_released", slot_key=slot_key, removal_code=code)

    async def run_auto_release(self, stop_event: asyncio.Event) -> None:
        """Sweep every `sweep_interval_seconds` until `stop_event` is set."""
        logger.info("farewell_auto_release_started", interval=self._sweep_interval)
        while not stop_event.is_set():
            try:
                await self.sweep()
            except Exception as e:
                logger.error("farewell_sweep_failed", error=str(e))
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self._sweep_interval)
            except TimeoutError:
                continue
        logger.info("farewell_auto_release_stopped")

    # === QUERIES ===

    @property
    def schedule(self) -> Mapping[str, str]:
        """Copy of the slot key → removal code map."""
        return dict(self._schedule)

    @property
    def dirty_slots(self) -> frozenset[str]:
        """Slot keys booked since the last commit."""
        return frozenset(self._dirty)

    def code_at(self, slot_key: str) -> str | None:
        return self._schedule.get(slot_key)

    def is_scheduled(self, code: str) -> bool:
        """Check whether a removal holds any farewell slot."""
        return code in self._schedule.values()

    def week_view(self, reference: date) -> dict[str, str | None]:
        """Calendar cells of the working week containing `reference`.

        Returns:
            Ordered map of slot key to booked removal code (None if free)
        """
        return {key: self._schedule.get(key) for key in week_slot_keys(reference)}

    async def available_removals(self, search: str = "") -> list[Removal]:
        """Removals that can be booked into a free slot.

        Individual-modality removals awaiting junior finance that are not
        booked anywhere yet, optionally filtered by code, pet or tutor name.
        """
        booked = set(self._schedule.values())
        removals = await self._store.list_removals()
        return [
            r
            for r in removals
            if r.modality.is_individual
            and r.status == _BOOKABLE_STATUS
            and r.code not in booked
            and r.matches(search)
        ]
