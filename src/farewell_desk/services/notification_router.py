"""Notification router for farewell_desk.

This module stores notifications addressed to a user or a staff role and
answers "what can this actor see" queries.
"""

from collections.abc import Callable
from datetime import datetime

from farewell_desk.logging import get_logger
from farewell_desk.models.actor import Actor, Role
from farewell_desk.models.notification import Notification, NotificationTarget
from farewell_desk.utils.ids import time_based_id

__all__ = [
    "NotificationRouter",
]

logger = get_logger(__name__)


class NotificationRouter:
    """Role- and user-scoped notification store.

    Notifications are kept newest first. Visibility uses OR semantics: an
    actor sees a notification addressed to its ID or to its role.

    Example:
        router = NotificationRouter()
        router.publish("Removal A000001 awaiting sign-off", recipient_role=Role.MASTER_FINANCE)
        unread = router.unread_count(actor)
    """

    def __init__(
        self,
        *,
        retention_limit: int | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the router.

        Args:
            retention_limit: Keep at most this many notifications (oldest are
                dropped first). None keeps everything.
            clock: Source of publish timestamps
        """
        self._notifications: list[Notification] = []
        self._retention_limit = retention_limit
        self._clock = clock

    def publish(
        self,
        message: str,
        *,
        recipient_id: str | None = None,
        recipient_role: Role | None = None,
    ) -> Notification:
        """Store a new unread notification.

        Args:
            message: Notification text
            recipient_id: Target user ID
            recipient_role: Target staff role

        Returns:
            The stored notification

        Raises:
            ValueError: If neither recipient_id nor recipient_role is given
        """
        target = NotificationTarget(id=recipient_id, role=recipient_role)
        now = self._clock()
        notification = Notification(
            id=time_based_id(now),
            message=message,
            date=now,
            recipient=target,
        )
        self._notifications.insert(0, notification)

        if self._retention_limit is not None and len(self._notifications) > self._retention_limit:
            dropped = len(self._notifications) - self._retention_limit
            del self._notifications[self._retention_limit :]
            logger.debug("notifications_pruned", dropped=dropped)

        logger.debug(
            "notification_published",
            notification_id=notification.id,
            recipient_id=recipient_id,
            recipient_role=recipient_role,
        )
        return notification

    def visible_to(self, actor: Actor | None) -> list[Notification]:
        """Notifications addressed to the actor, most recent first."""
        if actor is None:
            return []
        visible = [n for n in self._notifications if n.recipient.includes(actor)]
        visible.sort(key=lambda n: n.date, reverse=True)
        return visible

    def unread_count(self, actor: Actor | None) -> int:
        return sum(1 for n in self.visible_to(actor) if not n.read)

    def mark_all_read_for(self, actor: Actor | None) -> int:
        """Mark every notification visible to the actor as read.

        Idempotent: a second call flips nothing.

        Returns:
            Number of notifications that changed from unread to read
        """
        if actor is None:
            return 0

        flipped = 0
        updated: list[Notification] = []
        for notification in self._notifications:
            if not notification.read and notification.recipient.includes(actor):
                updated.append(notification.as_read())
                flipped += 1
            else:
                updated.append(notification)
        self._notifications = updated

        if flipped:
            logger.debug("notifications_marked_read", actor_id=actor.id, count=flipped)
        return flipped

    def __len__(self) -> int:
        return len(self._notifications)
