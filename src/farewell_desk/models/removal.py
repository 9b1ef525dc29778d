"""Removal models for farewell_desk.

A removal is one pet pickup-and-cremation request travelling through the
workflow. The coordination engines only read removals and change them
through `RemovalPatch` objects applied by the removal store.
"""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

from farewell_desk.models.actor import Role

__all__ = [
    "DriverRef",
    "Modality",
    "PetInfo",
    "Removal",
    "RemovalHistoryEntry",
    "RemovalPatch",
    "RemovalStatus",
    "TutorInfo",
    "responsible_role",
]


class RemovalStatus(StrEnum):
    """Workflow statuses, in the order a removal normally visits them."""

    REQUESTED = "requested"
    RECEIVED = "received"
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in-progress"
    EN_ROUTE = "en-route"
    COLLECTED = "collected"
    COMPLETED = "completed"
    AWAITING_JUNIOR_FINANCE = "awaiting-junior-finance"
    AWAITING_MASTER_SIGNOFF = "awaiting-master-signoff"
    AWAITING_PAYMENT = "awaiting-payment"
    PAYMENT_COMPLETED = "payment-completed"
    CANCELLED = "cancelled"
    FINALIZED = "finalized"


class Modality(StrEnum):
    """Cremation modality. Only individual modalities get a farewell."""

    COLLECTIVE = "collective"
    INDIVIDUAL_SILVER = "individual-silver"
    INDIVIDUAL_GOLD = "individual-gold"

    @property
    def is_individual(self) -> bool:
        return self in (Modality.INDIVIDUAL_SILVER, Modality.INDIVIDUAL_GOLD)


_RESPONSIBLE_ROLES: dict[RemovalStatus, Role | None] = {
    RemovalStatus.REQUESTED: Role.RECEPTOR,
    RemovalStatus.RECEIVED: Role.RECEPTOR,
    RemovalStatus.SCHEDULED: Role.RECEPTOR,
    RemovalStatus.IN_PROGRESS: Role.DRIVER,
    RemovalStatus.EN_ROUTE: Role.DRIVER,
    RemovalStatus.COLLECTED: Role.DRIVER,
    RemovalStatus.COMPLETED: Role.OPERATIONS,
    RemovalStatus.AWAITING_JUNIOR_FINANCE: Role.JUNIOR_FINANCE,
    RemovalStatus.AWAITING_MASTER_SIGNOFF: Role.MASTER_FINANCE,
    RemovalStatus.AWAITING_PAYMENT: Role.MASTER_FINANCE,
    RemovalStatus.PAYMENT_COMPLETED: Role.MASTER_FINANCE,
    RemovalStatus.CANCELLED: None,
    RemovalStatus.FINALIZED: None,
}


def responsible_role(status: RemovalStatus) -> Role | None:
    """Staff role that has to act next on a removal in this status.

    Returns None for terminal statuses.
    """
    return _RESPONSIBLE_ROLES[status]


class TutorInfo(BaseModel, frozen=True):
    """Pet owner contact data."""

    name: str
    document: str = Field(default="", description="CPF or CNPJ")
    phone: str = ""
    email: str = ""


class PetInfo(BaseModel, frozen=True):
    """The animal being removed."""

    name: str
    species: str = ""
    breed: str = ""
    gender: str = ""
    weight: str = Field(default="", description="Declared weight, free text")
    cause_of_death: str = ""


class DriverRef(BaseModel, frozen=True):
    """Driver assigned to a removal."""

    id: str
    name: str


class RemovalHistoryEntry(BaseModel, frozen=True):
    """One line of a removal's audit trail.

    Attributes:
        date: When the action happened
        action: Human-readable description
        user: Display name of whoever (or whatever) acted
        reason: Optional justification (cancellations, adjustments)
    """

    date: datetime
    action: str
    user: str
    reason: str | None = None


class Removal(BaseModel, frozen=True):
    """Public Removal data transfer object.

    The removal code is the identity every other component refers to.
    """

    code: str
    created_by_id: str
    clinic_name: str | None = None
    modality: Modality
    tutor: TutorInfo
    pet: PetInfo
    status: RemovalStatus = RemovalStatus.REQUESTED
    history: tuple[RemovalHistoryEntry, ...] = ()
    value: float = Field(default=0.0, ge=0.0)
    observations: str = ""
    scheduled_date: str | None = Field(default=None, description="YYYY-MM-DD")
    scheduled_time: str | None = Field(default=None, description="HH:MM")
    real_weight: float | None = None
    assigned_driver: DriverRef | None = None
    created_at: datetime = Field(default_factory=datetime.now)

    def matches(self, term: str) -> bool:
        """Case-insensitive search on code, pet name and tutor name."""
        needle = term.strip().lower()
        if not needle:
            return True
        return (
            needle in self.code.lower()
            or needle in self.pet.name.lower()
            or needle in self.tutor.name.lower()
        )


class RemovalPatch(BaseModel, frozen=True):
    """Partial update for a removal.

    Unset fields are left untouched. History entries are appended to the
    removal's current history by the store, never replaced, so callers do
    not need to read the removal first.
    """

    status: RemovalStatus | None = None
    append_history: tuple[RemovalHistoryEntry, ...] = ()
    assigned_driver: DriverRef | None = None
    real_weight: float | None = None
    scheduled_date: str | None = None
    scheduled_time: str | None = None

    def field_updates(self) -> dict[str, object]:
        """Plain field updates, excluding history."""
        return {
            name: value
            for name, value in (
                ("status", self.status),
                ("assigned_driver", self.assigned_driver),
                ("real_weight", self.real_weight),
                ("scheduled_date", self.scheduled_date),
                ("scheduled_time", self.scheduled_time),
            )
            if value is not None
        }
