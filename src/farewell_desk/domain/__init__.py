"""Internal domain entities for farewell_desk."""

from farewell_desk.domain.conversation import Conversation

__all__ = [
    "Conversation",
]
