"""Identity interface for farewell_desk."""

from typing import Protocol, runtime_checkable

from farewell_desk.models.actor import Actor

__all__ = [
    "IdentityInterface",
]


@runtime_checkable
class IdentityInterface(Protocol):
    """Supplies the actor the engines act on behalf of."""

    def current(self) -> Actor | None:
        """Return the signed-in actor, or None when nobody is signed in."""
        ...
