"""Actor models for farewell_desk.

An actor is whoever is currently signed in: a client (individual tutor or
clinic) or an employee holding one of the staff roles.
"""

from enum import StrEnum

from pydantic import BaseModel, Field, model_validator

__all__ = [
    "Actor",
    "ChatSide",
    "Role",
    "UserType",
    "chat_side",
]


class UserType(StrEnum):
    """Kinds of account."""

    INDIVIDUAL = "individual"
    CLINIC = "clinic"
    EMPLOYEE = "employee"


class Role(StrEnum):
    """Staff roles. Only employees carry a role."""

    ADMINISTRATOR = "administrator"
    RECEPTOR = "receptor"
    DRIVER = "driver"
    JUNIOR_FINANCE = "junior_finance"
    MASTER_FINANCE = "master_finance"
    MANAGEMENT = "management"
    OPERATIONS = "operations"


class ChatSide(StrEnum):
    """Which end of a conversation an actor speaks for."""

    CLIENT = "client"
    RECEPTOR = "receptor"


class Actor(BaseModel, frozen=True):
    """Signed-in user as seen by the coordination engines.

    Attributes:
        id: Stable user ID (a client's ID doubles as its conversation ID)
        name: Display name (person or clinic trade name)
        user_type: Account kind
        role: Staff role, set for employees only
    """

    id: str = Field(min_length=1)
    name: str
    user_type: UserType
    role: Role | None = None

    @model_validator(mode="after")
    def _role_matches_user_type(self) -> "Actor":
        if self.user_type == UserType.EMPLOYEE and self.role is None:
            raise ValueError("employees must have a role")
        if self.user_type != UserType.EMPLOYEE and self.role is not None:
            raise ValueError("only employees can have a role")
        return self

    @property
    def first_name(self) -> str:
        """First word of the display name."""
        parts = self.name.split()
        return parts[0] if parts else self.name

    @property
    def is_client(self) -> bool:
        return self.user_type != UserType.EMPLOYEE


def chat_side(actor: Actor) -> ChatSide | None:
    """Map an actor to its side of the client/receptor chat.

    Every user type and role is listed explicitly so that adding a new one
    fails loudly here instead of silently disabling chat.
    """
    if actor.user_type in (UserType.INDIVIDUAL, UserType.CLINIC):
        return ChatSide.CLIENT
    if actor.user_type != UserType.EMPLOYEE:
        raise ValueError(f"Unhandled user type: {actor.user_type!r}")

    if actor.role == Role.RECEPTOR:
        return ChatSide.RECEPTOR
    if actor.role in (
        Role.ADMINISTRATOR,
        Role.DRIVER,
        Role.JUNIOR_FINANCE,
        Role.MASTER_FINANCE,
        Role.MANAGEMENT,
        Role.OPERATIONS,
    ):
        return None
    raise ValueError(f"Unhandled role: {actor.role!r}")
