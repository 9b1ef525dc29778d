"""Shared test fixtures for farewell_desk.

This module provides pytest fixtures used across all tests.
"""

from collections.abc import Callable
from typing import Any

import pytest

from farewell_desk.config import ChatSettings
from farewell_desk.infra.memory.identity import SessionIdentity
from farewell_desk.infra.memory.removal_store import InMemoryRemovalStore
from farewell_desk.models.actor import Actor, Role, UserType
from farewell_desk.models.removal import (
    Modality,
    PetInfo,
    Removal,
    RemovalStatus,
    TutorInfo,
)
from farewell_desk.services.chat_session import ChatSessionEngine
from farewell_desk.services.farewell_scheduler import FarewellScheduler
from farewell_desk.services.notification_router import NotificationRouter
from tests.mocks.manual_scheduler import ManualScheduler
from tests.mocks.recording_attachments import RecordingAttachmentProvider


def build_removal(
    code: str = "A000001",
    *,
    status: RemovalStatus = RemovalStatus.AWAITING_JUNIOR_FINANCE,
    modality: Modality = Modality.INDIVIDUAL_GOLD,
    pet_name: str = "Rex",
    tutor_name: str = "Maria Souza",
    created_by_id: str = "pf_123",
    **kwargs: Any,
) -> Removal:
    """Build a removal with sensible defaults."""
    return Removal(
        code=code,
        created_by_id=created_by_id,
        modality=modality,
        tutor=TutorInfo(name=tutor_name),
        pet=PetInfo(name=pet_name, species="dog"),
        status=status,
        **kwargs,
    )


# Actor fixtures
@pytest.fixture
def client_actor() -> Actor:
    return Actor(id="pf_123", name="João da Silva", user_type=UserType.INDIVIDUAL)


@pytest.fixture
def clinic_actor() -> Actor:
    return Actor(id="clinic_456", name="Clínica Vet Top", user_type=UserType.CLINIC)


@pytest.fixture
def receptor_actor() -> Actor:
    return Actor(
        id="func_receptor_789",
        name="Ana Receptor",
        user_type=UserType.EMPLOYEE,
        role=Role.RECEPTOR,
    )


@pytest.fixture
def junior_finance_actor() -> Actor:
    return Actor(
        id="func_junior_789",
        name="Carlos Junior",
        user_type=UserType.EMPLOYEE,
        role=Role.JUNIOR_FINANCE,
    )


@pytest.fixture
def master_finance_actor() -> Actor:
    return Actor(
        id="func_master_789",
        name="Beatriz Master",
        user_type=UserType.EMPLOYEE,
        role=Role.MASTER_FINANCE,
    )


@pytest.fixture
def driver_actor() -> Actor:
    return Actor(
        id="driver_1",
        name="Pedro Motorista",
        user_type=UserType.EMPLOYEE,
        role=Role.DRIVER,
    )


# Collaborator fixtures
@pytest.fixture
def manual_scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def identity() -> SessionIdentity:
    return SessionIdentity()


@pytest.fixture
def attachments() -> RecordingAttachmentProvider:
    return RecordingAttachmentProvider()


@pytest.fixture
def router(manual_scheduler: ManualScheduler) -> NotificationRouter:
    return NotificationRouter(clock=manual_scheduler.now)


@pytest.fixture
def store(router: NotificationRouter, manual_scheduler: ManualScheduler) -> InMemoryRemovalStore:
    return InMemoryRemovalStore(router, clock=manual_scheduler.now)


@pytest.fixture
def removal_factory() -> Callable[..., Removal]:
    return build_removal


# Engine fixtures
@pytest.fixture
def chat_settings() -> ChatSettings:
    return ChatSettings(
        inactivity_timeout_seconds=1200,
        closing_delay_seconds=3,
        auto_reply_delay_seconds=1.5,
    )


@pytest.fixture
def chat_engine(
    identity: SessionIdentity,
    attachments: RecordingAttachmentProvider,
    manual_scheduler: ManualScheduler,
    router: NotificationRouter,
    chat_settings: ChatSettings,
) -> ChatSessionEngine:
    return ChatSessionEngine(
        identity,
        attachments,
        manual_scheduler,
        router,
        settings=chat_settings,
        clock=manual_scheduler.now,
    )


@pytest.fixture
def farewell_scheduler(
    store: InMemoryRemovalStore,
    router: NotificationRouter,
    identity: SessionIdentity,
    manual_scheduler: ManualScheduler,
) -> FarewellScheduler:
    return FarewellScheduler(
        store,
        router,
        identity,
        release_grace_minutes=30,
        clock=manual_scheduler.now,
    )
