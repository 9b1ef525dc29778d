"""Notification models for farewell_desk."""

from datetime import datetime

from pydantic import BaseModel, model_validator

from farewell_desk.models.actor import Actor, Role

__all__ = [
    "Notification",
    "NotificationTarget",
]


class NotificationTarget(BaseModel, frozen=True):
    """Who a notification is addressed to.

    A notification is visible to an actor whose ID matches `id` OR whose
    role matches `role`. At least one of them must be set.
    """

    id: str | None = None
    role: Role | None = None

    @model_validator(mode="after")
    def _has_recipient(self) -> "NotificationTarget":
        if self.id is None and self.role is None:
            raise ValueError("notification target needs a recipient id or role")
        return self

    def includes(self, actor: Actor) -> bool:
        if self.id is not None and self.id == actor.id:
            return True
        return self.role is not None and self.role == actor.role


class Notification(BaseModel, frozen=True):
    """Stored notification."""

    id: str
    message: str
    read: bool = False
    date: datetime
    recipient: NotificationTarget

    def as_read(self) -> "Notification":
        return self.model_copy(update={"read": True})
