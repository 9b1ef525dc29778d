"""Session identity holder for farewell_desk."""

from farewell_desk.interfaces.identity import IdentityInterface
from farewell_desk.logging import get_logger
from farewell_desk.models.actor import Actor

__all__ = [
    "SessionIdentity",
]

logger = get_logger(__name__)


class SessionIdentity(IdentityInterface):
    """Holds the actor signed in to the current client session.

    Credential checks happen upstream; this only records the outcome.
    """

    def __init__(self, actor: Actor | None = None) -> None:
        self._actor = actor

    def current(self) -> Actor | None:
        return self._actor

    def sign_in(self, actor: Actor) -> None:
        self._actor = actor
        logger.info("actor_signed_in", actor_id=actor.id, role=actor.role)

    def sign_out(self) -> None:
        if self._actor is not None:
            logger.info("actor_signed_out", actor_id=self._actor.id)
        self._actor = None

    @property
    def is_authenticated(self) -> bool:
        return self._actor is not None
