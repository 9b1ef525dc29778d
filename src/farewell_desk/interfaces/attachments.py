"""Attachment provider interface for farewell_desk.

This module defines the Protocol for minting and revoking the transient
handles that chat messages use to reference locally held files.
"""

from typing import Protocol, runtime_checkable

from farewell_desk.models.chat import AttachmentFile

__all__ = [
    "AttachmentProviderInterface",
]


@runtime_checkable
class AttachmentProviderInterface(Protocol):
    """Contract for transient attachment handles.

    Each minted handle must be revoked exactly once. Revoking a handle twice
    is a contract violation; callers guarantee it cannot happen.
    """

    def mint(self, file: AttachmentFile) -> str:
        """Create a handle for a file.

        Args:
            file: File to expose

        Returns:
            Handle usable as an attachment URL
        """
        ...

    def revoke(self, handle: str) -> None:
        """Release a handle previously returned by `mint`.

        Args:
            handle: Handle to release
        """
        ...
