"""In-memory attachment handles for farewell_desk.

This module keeps attached file contents in process memory behind
``blob:`` handles, the way a browser exposes object URLs.
"""

import uuid

from farewell_desk.interfaces.attachments import AttachmentProviderInterface
from farewell_desk.logging import get_logger
from farewell_desk.models.chat import AttachmentFile

__all__ = [
    "InMemoryAttachmentProvider",
]

logger = get_logger(__name__)

_HANDLE_PREFIX = "blob:"


class InMemoryAttachmentProvider(AttachmentProviderInterface):
    """Maps ``blob:`` handles to attached files until they are revoked."""

    def __init__(self) -> None:
        self._files: dict[str, AttachmentFile] = {}

    def mint(self, file: AttachmentFile) -> str:
        handle = f"{_HANDLE_PREFIX}{uuid.uuid4()}"
        self._files[handle] = file
        logger.debug("attachment_minted", handle=handle, name=file.name, size=len(file.content))
        return handle

    def revoke(self, handle: str) -> None:
        """Release a handle.

        Raises:
            ValueError: If the handle is unknown or was already revoked
        """
        if self._files.pop(handle, None) is None:
            raise ValueError(f"Attachment handle {handle!r} is not live")
        logger.debug("attachment_revoked", handle=handle)

    def resolve(self, handle: str) -> AttachmentFile | None:
        """Look up the file behind a live handle."""
        return self._files.get(handle)

    @property
    def live_handles(self) -> frozenset[str]:
        return frozenset(self._files)
