"""Chat models for farewell_desk.

These models represent client/receptor conversations as exposed to callers.
"""

from datetime import datetime

from pydantic import BaseModel, Field

__all__ = [
    "BOT_SENDER_ID",
    "SYSTEM_SENDER_ID",
    "Attachment",
    "AttachmentFile",
    "ChatMessage",
    "ConversationDTO",
]

SYSTEM_SENDER_ID = "system"
BOT_SENDER_ID = "receptor_bot"


class AttachmentFile(BaseModel, frozen=True):
    """File picked by a sender, before a handle has been minted for it."""

    name: str
    content: bytes = b""
    content_type: str = "application/octet-stream"


class Attachment(BaseModel, frozen=True):
    """Attachment stored on a message.

    Attributes:
        name: Original file name
        url: Transient handle minted by the attachment provider
    """

    name: str
    url: str


class ChatMessage(BaseModel, frozen=True):
    """A single chat message. Immutable once appended.

    Attributes:
        id: Unique, time-derived message ID
        sender_id: Actor ID, or SYSTEM_SENDER_ID / BOT_SENDER_ID
        sender_name: Display name shown next to the message
        text: Message body (may be empty when an attachment is sent)
        attachment: Optional attachment reference
        timestamp: When the message was appended
        sequence: Append order; the canonical ordering of messages
    """

    id: str
    sender_id: str
    sender_name: str
    text: str = ""
    attachment: Attachment | None = None
    timestamp: datetime
    sequence: int = Field(ge=0)

    @property
    def is_automated(self) -> bool:
        return self.sender_id in (SYSTEM_SENDER_ID, BOT_SENDER_ID)


class ConversationDTO(BaseModel, frozen=True):
    """Snapshot of a conversation between one client and the receptors.

    Attributes:
        id: Conversation ID (the client's actor ID)
        client_name: Display name of the client
        messages: Messages in append order
        unread_by_receptor: Messages the receptor side has not seen
        unread_by_client: Messages the client side has not seen
        last_message_timestamp: Last activity, used to sort conversation lists
    """

    id: str
    client_name: str
    messages: tuple[ChatMessage, ...] = ()
    unread_by_receptor: int = Field(default=0, ge=0)
    unread_by_client: int = Field(default=0, ge=0)
    last_message_timestamp: datetime
