"""Integration tests for farewell_desk coordination flows."""

from datetime import datetime
from pathlib import Path

import pytest
from pydantic import TypeAdapter

from farewell_desk.config import ChatSettings
from farewell_desk.infra.memory.identity import SessionIdentity
from farewell_desk.infra.memory.removal_store import InMemoryRemovalStore
from farewell_desk.models.actor import Actor
from farewell_desk.models.chat import BOT_SENDER_ID, SYSTEM_SENDER_ID
from farewell_desk.models.removal import Removal, RemovalStatus
from farewell_desk.models.schedule import TimeBucket, format_slot_key
from farewell_desk.services.chat_session import ChatSessionEngine
from farewell_desk.services.farewell_scheduler import FarewellScheduler
from farewell_desk.services.notification_router import NotificationRouter
from tests.mocks.manual_scheduler import ManualScheduler
from tests.mocks.recording_attachments import RecordingAttachmentProvider

# Path to fixtures
FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


def load_removals() -> list[Removal]:
    raw = (FIXTURES_DIR / "removals.json").read_bytes()
    return TypeAdapter(list[Removal]).validate_json(raw)


@pytest.fixture
def seeded_store(
    router: NotificationRouter,
    manual_scheduler: ManualScheduler,
) -> InMemoryRemovalStore:
    return InMemoryRemovalStore(router, load_removals(), clock=manual_scheduler.now)


class TestFarewellWeek:
    """A junior finance operator lays out and commits a farewell week."""

    @pytest.mark.asyncio
    async def test_book_commit_and_release(
        self,
        seeded_store: InMemoryRemovalStore,
        router: NotificationRouter,
        identity: SessionIdentity,
        manual_scheduler: ManualScheduler,
        junior_finance_actor: Actor,
        master_finance_actor: Actor,
    ) -> None:
        scheduler = FarewellScheduler(
            seeded_store, router, identity, clock=manual_scheduler.now
        )
        identity.sign_in(junior_finance_actor)
        today = manual_scheduler.now().date()

        candidates = await scheduler.available_removals()
        assert [r.code for r in candidates] == ["A000001", "A000002"]

        rex, mia = candidates
        morning = format_slot_key(today, TimeBucket.MORNING)
        emergency = format_slot_key(today, TimeBucket.EMERGENCY)
        assert scheduler.book(morning, rex)
        assert scheduler.book(emergency, mia)
        assert await scheduler.available_removals() == []

        result = await scheduler.commit()
        assert sorted(result.committed) == ["A000001", "A000002"]

        week = scheduler.week_view(today)
        assert week[morning] == "A000001"
        assert week[emergency] == "A000002"

        identity.sign_in(master_finance_actor)
        assert router.unread_count(master_finance_actor) == 2

        # 09:00 to 11:31 passes the morning grace period
        manual_scheduler.advance((2 * 60 + 31) * 60)
        sweep = await scheduler.sweep()

        assert sweep.released == [morning]
        assert scheduler.schedule == {emergency: "A000002"}

        released = await seeded_store.get_removal("A000001")
        assert released is not None
        assert released.status == RemovalStatus.AWAITING_MASTER_SIGNOFF
        assert [h.user for h in released.history] == [
            "Clínica Vet Top",
            "Pedro Motorista",
            junior_finance_actor.name,
            "System",
        ]
        assert router.unread_count(master_finance_actor) == 3

    def test_fixture_removals_load(self) -> None:
        removals = load_removals()

        assert len(removals) == 4
        assert removals[0].history[0].date == datetime(2024, 6, 1, 10, 15)
        assert removals[3].assigned_driver is not None
        assert removals[3].status == RemovalStatus.EN_ROUTE


class TestClientConversation:
    """A client talks to reception until the conversation times out."""

    def test_conversation_lifecycle(
        self,
        router: NotificationRouter,
        identity: SessionIdentity,
        manual_scheduler: ManualScheduler,
        client_actor: Actor,
        receptor_actor: Actor,
    ) -> None:
        attachments = RecordingAttachmentProvider()
        engine = ChatSessionEngine(
            identity,
            attachments,
            manual_scheduler,
            router,
            settings=ChatSettings(),
            clock=manual_scheduler.now,
        )

        identity.sign_in(client_actor)
        engine.open()
        engine.send(None, "Hello, my cat Mia passed away this morning.")
        manual_scheduler.advance(2)

        identity.sign_in(receptor_actor)
        assert router.unread_count(receptor_actor) == 1
        assert engine.total_unread() == 1
        [summary] = engine.conversations()
        assert summary.client_name == client_actor.name

        engine.open(client_actor.id)
        engine.send(None, "We are sorry for your loss. A driver can be there by 14:00.")
        engine.dismiss()

        identity.sign_in(client_actor)
        assert engine.total_unread() == 2
        assert router.unread_count(client_actor) == 1
        dto = engine.open()
        assert dto is not None
        assert engine.total_unread() == 0
        assert [m.sender_id for m in dto.messages] == [
            client_actor.id,
            BOT_SENDER_ID,
            receptor_actor.id,
        ]

        manual_scheduler.advance(20 * 60)
        dto = engine.active_conversation
        assert dto is not None
        assert dto.messages[-1].sender_id == SYSTEM_SENDER_ID

        manual_scheduler.advance(3)
        assert engine.conversations() == []
        assert not engine.is_open
        assert manual_scheduler.pending == 0
