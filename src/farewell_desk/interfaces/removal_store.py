"""Removal store interface for farewell_desk.

This module defines the Protocol for the workflow store that owns removal
records and their status transitions.
"""

from datetime import datetime
from typing import Protocol, runtime_checkable

from farewell_desk.models.removal import Removal, RemovalPatch

__all__ = [
    "RemovalStoreInterface",
    "RequestPromoterInterface",
]


@runtime_checkable
class RemovalStoreInterface(Protocol):
    """Contract for the workflow removal store.

    The coordination engines never mutate removals directly; every change
    goes through `update_removal`.
    """

    async def get_removal(self, code: str) -> Removal | None:
        """Get a removal by code.

        Args:
            code: Removal code

        Returns:
            Removal if found, None otherwise
        """
        ...

    async def list_removals(self) -> list[Removal]:
        """Get all current removals, newest first.

        Returns:
            List of removals
        """
        ...

    async def update_removal(self, code: str, patch: RemovalPatch) -> Removal | None:
        """Apply a partial update to a removal.

        Args:
            code: Removal code
            patch: Fields to set and history entries to append

        Returns:
            The updated removal, or None if the code is unknown
        """
        ...


@runtime_checkable
class RequestPromoterInterface(Protocol):
    """Optional store capability: promote scheduled pickups that came due.

    Stores implementing it get a background promotion loop from the
    orchestrator.
    """

    async def promote_due_requests(
        self,
        now: datetime | None = None,
        window_minutes: int = 10,
    ) -> list[str]:
        """Turn scheduled removals whose time just arrived into live requests.

        Args:
            now: Reference time (default: the store clock)
            window_minutes: How long after its time a pickup is still promoted

        Returns:
            Codes of promoted removals
        """
        ...
