"""In-memory collaborator implementations for farewell_desk."""

from farewell_desk.infra.memory.attachments import InMemoryAttachmentProvider
from farewell_desk.infra.memory.identity import SessionIdentity
from farewell_desk.infra.memory.removal_store import InMemoryRemovalStore

__all__ = [
    "InMemoryAttachmentProvider",
    "InMemoryRemovalStore",
    "SessionIdentity",
]
