"""Internal Conversation entity for farewell_desk.

This module contains the internal Conversation domain model with the
unread-counter bookkeeping.
"""

from dataclasses import dataclass, field
from datetime import datetime

from farewell_desk.models.actor import ChatSide
from farewell_desk.models.chat import ChatMessage, ConversationDTO

__all__ = [
    "Conversation",
]


@dataclass
class Conversation:
    """Internal Conversation entity with business logic.

    This is a mutable internal representation owned by the chat engine.
    Convert to ConversationDTO for external use.
    """

    id: str
    client_name: str
    last_message_timestamp: datetime
    messages: list[ChatMessage] = field(default_factory=list)
    unread_by_receptor: int = 0
    unread_by_client: int = 0

    def append(self, message: ChatMessage, *, notify: ChatSide | None) -> None:
        """Append a message and bump the unread counter of `notify`.

        Args:
            message: Message to append
            notify: Side that has not seen the message yet, or None
        """
        self.messages.append(message)
        self.last_message_timestamp = message.timestamp
        if notify == ChatSide.CLIENT:
            self.unread_by_client += 1
        elif notify == ChatSide.RECEPTOR:
            self.unread_by_receptor += 1

    def mark_read(self, side: ChatSide) -> None:
        """Reset the unread counter of the side that is viewing."""
        if side == ChatSide.CLIENT:
            self.unread_by_client = 0
        elif side == ChatSide.RECEPTOR:
            self.unread_by_receptor = 0

    def to_dto(self) -> ConversationDTO:
        """Convert to immutable DTO for external use."""
        return ConversationDTO(
            id=self.id,
            client_name=self.client_name,
            messages=tuple(self.messages),
            unread_by_receptor=self.unread_by_receptor,
            unread_by_client=self.unread_by_client,
            last_message_timestamp=self.last_message_timestamp,
        )
