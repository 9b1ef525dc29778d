"""Public DTO models for farewell_desk.

This module exports all public data transfer objects.
"""

from farewell_desk.models.actor import Actor, ChatSide, Role, UserType, chat_side
from farewell_desk.models.chat import (
    BOT_SENDER_ID,
    SYSTEM_SENDER_ID,
    Attachment,
    AttachmentFile,
    ChatMessage,
    ConversationDTO,
)
from farewell_desk.models.notification import Notification, NotificationTarget
from farewell_desk.models.removal import (
    DriverRef,
    Modality,
    PetInfo,
    Removal,
    RemovalHistoryEntry,
    RemovalPatch,
    RemovalStatus,
    TutorInfo,
    responsible_role,
)
from farewell_desk.models.schedule import (
    SlotKey,
    TimeBucket,
    format_slot_key,
    parse_slot_key,
    week_slot_keys,
)

__all__ = [
    "BOT_SENDER_ID",
    "SYSTEM_SENDER_ID",
    "Actor",
    "Attachment",
    "AttachmentFile",
    "ChatMessage",
    "ChatSide",
    "ConversationDTO",
    "DriverRef",
    "Modality",
    "Notification",
    "NotificationTarget",
    "PetInfo",
    "Removal",
    "RemovalHistoryEntry",
    "RemovalPatch",
    "RemovalStatus",
    "Role",
    "SlotKey",
    "TimeBucket",
    "TutorInfo",
    "UserType",
    "chat_side",
    "format_slot_key",
    "parse_slot_key",
    "responsible_role",
    "week_slot_keys",
]
