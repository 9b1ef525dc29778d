"""Chat session engine for farewell_desk.

This module manages client/receptor conversations: message append, unread
counters per side, the per-conversation inactivity timeout, the one-time
automated reply and the lifetime of attachment handles.
"""

import itertools
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from farewell_desk.config import ChatSettings
from farewell_desk.domain.conversation import Conversation
from farewell_desk.interfaces.attachments import AttachmentProviderInterface
from farewell_desk.interfaces.identity import IdentityInterface
from farewell_desk.interfaces.scheduler import ScheduledTask, TaskSchedulerInterface
from farewell_desk.logging import get_logger
from farewell_desk.models.actor import Actor, ChatSide, Role, chat_side
from farewell_desk.models.chat import (
    BOT_SENDER_ID,
    SYSTEM_SENDER_ID,
    Attachment,
    AttachmentFile,
    ChatMessage,
    ConversationDTO,
)
from farewell_desk.services.notification_router import NotificationRouter
from farewell_desk.utils.ids import time_based_id

__all__ = [
    "ChatSessionEngine",
]

logger = get_logger(__name__)


@dataclass
class _Session:
    """A live conversation plus everything that must be released with it."""

    conversation: Conversation
    handles: list[str] = field(default_factory=list)
    inactivity: ScheduledTask | None = None
    closing: ScheduledTask | None = None
    auto_reply: ScheduledTask | None = None
    auto_reply_scheduled: bool = False

    def cancel_timers(self) -> None:
        for task in (self.inactivity, self.closing, self.auto_reply):
            if task is not None:
                task.cancel()
        self.inactivity = None
        self.closing = None
        self.auto_reply = None


class ChatSessionEngine:
    """Conversation lifecycle engine.

    Each conversation belongs to one client (its ID is the client's actor
    ID) and is shared by every receptor. Conversations end on explicit
    `close`, on inactivity, or on `shutdown`; all three go through the same
    teardown, which cancels the conversation's timers and revokes its
    attachment handles.

    Example:
        engine = ChatSessionEngine(identity, attachments, scheduler, router)
        engine.open()
        engine.send(None, "Hello, I need a pickup")
    """

    def __init__(
        self,
        identity: IdentityInterface,
        attachments: AttachmentProviderInterface,
        scheduler: TaskSchedulerInterface,
        router: NotificationRouter,
        *,
        settings: ChatSettings | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the engine with its collaborators.

        Args:
            identity: Source of the acting user
            attachments: Mints and revokes attachment handles
            scheduler: Runs the inactivity, closing and auto-reply timers
            router: Notification router for new-message alerts
            settings: Timeouts and canned texts (default: ChatSettings())
            clock: Source of message timestamps
        """
        self._identity = identity
        self._attachments = attachments
        self._scheduler = scheduler
        self._router = router
        self._settings = settings or ChatSettings()
        self._clock = clock

        self._sessions: dict[str, _Session] = {}
        self._sequence = itertools.count()
        self._active_id: str | None = None
        self._is_open = False
        self._shut_down = False

    # === VIEW ===

    def open(self, conversation_id: str | None = None) -> ConversationDTO | None:
        """Open the chat for the current actor.

        A client opens (creating if needed) its own conversation. A receptor
        opens the conversation `conversation_id`, or the conversation list
        when no ID is given.

        Returns:
            The conversation now active, or None (list view or no-op)
        """
        participant = self._participant()
        if participant is None:
            return None
        actor, side = participant

        if side == ChatSide.CLIENT:
            session = self._sessions.get(actor.id)
            if session is None:
                session = self._create_session(actor)
            else:
                session.conversation.mark_read(ChatSide.CLIENT)
            self._active_id = actor.id
            self._is_open = True
            return session.conversation.to_dto()

        if conversation_id is None:
            self._active_id = None
            self._is_open = True
            return None

        session = self._sessions.get(conversation_id)
        if session is None:
            logger.debug("conversation_not_found", conversation_id=conversation_id)
            return None
        session.conversation.mark_read(ChatSide.RECEPTOR)
        self._active_id = conversation_id
        self._is_open = True
        return session.conversation.to_dto()

    def back_to_list(self) -> None:
        """Leave the active conversation and show the conversation list."""
        self._active_id = None

    def dismiss(self) -> None:
        """Hide the chat view. Receptors also drop the active conversation."""
        self._is_open = False
        actor = self._identity.current()
        if actor is not None and actor.role == Role.RECEPTOR:
            self._active_id = None

    # === MESSAGING ===

    def send(
        self,
        conversation_id: str | None,
        text: str,
        attachment: AttachmentFile | None = None,
    ) -> ChatMessage | None:
        """Append a message from the current actor.

        Clients always write to their own conversation and `conversation_id`
        is ignored for them. Receptors write to `conversation_id`, or to the
        active conversation when it is None.

        Returns:
            The appended message, or None if nothing was sent
        """
        participant = self._participant()
        if participant is None:
            return None
        actor, side = participant

        if not text.strip() and attachment is None:
            return None

        if side == ChatSide.CLIENT:
            conv_id = actor.id
            session = self._sessions.get(conv_id) or self._create_session(actor)
        else:
            conv_id = conversation_id or self._active_id
            session = self._sessions.get(conv_id) if conv_id else None
            if session is None:
                logger.debug("conversation_not_found", conversation_id=conv_id)
                return None

        attachment_ref = None
        if attachment is not None:
            handle = self._attachments.mint(attachment)
            session.handles.append(handle)
            attachment_ref = Attachment(name=attachment.name, url=handle)

        message = self._new_message(
            sender_id=actor.id,
            sender_name=actor.first_name,
            text=text,
            attachment=attachment_ref,
        )
        other_side = ChatSide.RECEPTOR if side == ChatSide.CLIENT else ChatSide.CLIENT
        session.conversation.append(message, notify=other_side)

        if side == ChatSide.CLIENT:
            self._router.publish(
                f"New chat message from {actor.name}",
                recipient_role=Role.RECEPTOR,
            )
        else:
            self._router.publish(
                f"You have a new message from {actor.name}",
                recipient_id=conv_id,
            )

        # New activity revives a conversation that is showing its closing notice
        if session.closing is not None:
            session.closing.cancel()
            session.closing = None
        self._restart_inactivity(conv_id, session)

        if side == ChatSide.CLIENT and not session.auto_reply_scheduled:
            session.auto_reply_scheduled = True
            first_name = actor.first_name
            session.auto_reply = self._scheduler.call_later(
                self._settings.auto_reply_delay_seconds,
                lambda: self._deliver_auto_reply(conv_id, session, first_name),
            )

        logger.debug(
            "chat_message_sent",
            conversation_id=conv_id,
            side=side,
            has_attachment=attachment_ref is not None,
        )
        return message

    # === TEARDOWN ===

    def close(self, conversation_id: str) -> bool:
        """Close a conversation, releasing its timers and attachments.

        Returns:
            True if the conversation existed
        """
        return self._teardown(conversation_id, reason="closed")

    def shutdown(self) -> None:
        """Tear down every conversation. Further opens and sends are no-ops."""
        self._shut_down = True
        for conv_id in list(self._sessions):
            self._teardown(conv_id, reason="shutdown")
        self._active_id = None
        self._is_open = False
        logger.info("chat_engine_shutdown")

    def resume(self) -> None:
        """Accept opens and sends again after `shutdown`."""
        if self._shut_down:
            self._shut_down = False
            logger.info("chat_engine_resumed")

    def _teardown(self, conversation_id: str, reason: str) -> bool:
        session = self._sessions.pop(conversation_id, None)
        if session is None:
            return False

        session.cancel_timers()
        handles, session.handles = session.handles, []
        for handle in handles:
            try:
                self._attachments.revoke(handle)
            except Exception as e:
                logger.error(
                    "attachment_revoke_failed",
                    conversation_id=conversation_id,
                    handle=handle,
                    error=str(e),
                )

        if self._active_id == conversation_id:
            self._active_id = None
            self._is_open = False

        logger.info(
            "conversation_closed",
            conversation_id=conversation_id,
            reason=reason,
            revoked_handles=len(handles),
        )
        return True

    # === TIMERS ===

    def _restart_inactivity(self, conversation_id: str, session: _Session) -> None:
        if session.inactivity is not None:
            session.inactivity.cancel()
        session.inactivity = self._scheduler.call_later(
            self._settings.inactivity_timeout_seconds,
            lambda: self._on_inactivity(conversation_id, session),
        )

    def _on_inactivity(self, conversation_id: str, session: _Session) -> None:
        if self._sessions.get(conversation_id) is not session:
            return
        session.inactivity = None

        notice = self._new_message(
            sender_id=SYSTEM_SENDER_ID,
            sender_name=self._settings.system_sender_name,
            text=self._settings.closing_text,
            suffix="closing",
        )
        session.conversation.append(notice, notify=None)
        session.closing = self._scheduler.call_later(
            self._settings.closing_delay_seconds,
            lambda: self._on_closing_elapsed(conversation_id, session),
        )
        logger.info("conversation_inactive", conversation_id=conversation_id)

    def _on_closing_elapsed(self, conversation_id: str, session: _Session) -> None:
        if self._sessions.get(conversation_id) is not session:
            return
        session.closing = None
        self._teardown(conversation_id, reason="inactivity")

    def _deliver_auto_reply(self, conversation_id: str, session: _Session, first_name: str) -> None:
        if self._sessions.get(conversation_id) is not session:
            return
        session.auto_reply = None

        reply = self._new_message(
            sender_id=BOT_SENDER_ID,
            sender_name=self._settings.bot_sender_name,
            text=self._settings.auto_reply_template.format(first_name=first_name),
            suffix="reply",
        )
        session.conversation.append(reply, notify=ChatSide.CLIENT)

    # === HELPERS ===

    def _participant(self) -> tuple[Actor, ChatSide] | None:
        if self._shut_down:
            return None
        actor = self._identity.current()
        if actor is None:
            logger.debug("chat_without_actor")
            return None
        side = chat_side(actor)
        if side is None:
            logger.debug("chat_not_available_for_role", role=actor.role)
            return None
        return actor, side

    def _create_session(self, client: Actor) -> _Session:
        conversation = Conversation(
            id=client.id,
            client_name=client.name,
            last_message_timestamp=self._clock(),
        )
        session = _Session(conversation=conversation)
        self._sessions[client.id] = session
        self._restart_inactivity(client.id, session)
        logger.info("conversation_opened", conversation_id=client.id)
        return session

    def _new_message(
        self,
        *,
        sender_id: str,
        sender_name: str,
        text: str,
        attachment: Attachment | None = None,
        suffix: str = "",
    ) -> ChatMessage:
        now = self._clock()
        return ChatMessage(
            id=time_based_id(now, suffix),
            sender_id=sender_id,
            sender_name=sender_name,
            text=text,
            attachment=attachment,
            timestamp=now,
            sequence=next(self._sequence),
        )

    # === QUERIES ===

    def conversations(self) -> list[ConversationDTO]:
        """All live conversations, most recent activity first."""
        ordered = sorted(
            (s.conversation for s in self._sessions.values()),
            key=lambda c: c.last_message_timestamp,
            reverse=True,
        )
        return [c.to_dto() for c in ordered]

    def get(self, conversation_id: str) -> ConversationDTO | None:
        session = self._sessions.get(conversation_id)
        return session.conversation.to_dto() if session else None

    @property
    def active_conversation(self) -> ConversationDTO | None:
        if self._active_id is None:
            return None
        return self.get(self._active_id)

    @property
    def is_open(self) -> bool:
        return self._is_open

    def total_unread(self) -> int:
        """Unread messages for the current actor's side."""
        participant = self._participant()
        if participant is None:
            return 0
        actor, side = participant
        if side == ChatSide.RECEPTOR:
            return sum(s.conversation.unread_by_receptor for s in self._sessions.values())
        session = self._sessions.get(actor.id)
        return session.conversation.unread_by_client if session else 0
