"""Tests for the in-memory storage backend."""

import pytest

from edqorta.core.exceptions import NotFound
from edqorta.models import (
    Conversation,
    Notification,
    NotificationType,
    Property,
    ScheduledTour,
    User,
    VerificationStatus,
)


@pytest.mark.asyncio
async def test_user_crud(storage):
    """Test user save and lookup."""
    saved = await storage.save_user(User(id="u-1", name="Ngozi"))
    assert saved.id == "u-1"

    retrieved = await storage.get_user("u-1")
    assert retrieved is not None
    assert retrieved.name == "Ngozi"

    assert await storage.get_user("missing") is None
    assert len(await storage.list_users()) == 1


@pytest.mark.asyncio
async def test_require_raises_not_found(storage):
    """Test lookup helpers surface missing entities."""
    with pytest.raises(NotFound) as exc_info:
        await storage.require_property("nope")

    assert exc_info.value.code == "NOT_FOUND"
    assert exc_info.value.details == {"entity": "property", "id": "nope"}


@pytest.mark.asyncio
async def test_properties_listed_newest_first(storage, lister):
    """Test new properties go to the front and updates keep their slot."""
    for i in range(3):
        await storage.save_property(Property(id=f"p-{i}", lister_id=lister.id, location=f"Plot {i}"))

    first = await storage.get_property("p-0")
    first.views = 10
    await storage.save_property(first)

    props = await storage.list_properties()
    assert [p.id for p in props] == ["p-2", "p-1", "p-0"]

    assert await storage.list_properties(lister_id="someone-else") == []


@pytest.mark.asyncio
async def test_find_conversation_ignores_order_and_teams(storage):
    """Test dedup lookup matches the participant set on non-team threads only."""
    await storage.save_conversation(
        Conversation(id="team", participant_ids=["a", "b"], property_id="p", team_id="t-1")
    )
    assert await storage.find_conversation("p", {"a", "b"}) is None

    await storage.save_conversation(
        Conversation(id="c-1", participant_ids=["a", "b"], property_id="p")
    )
    found = await storage.find_conversation("p", ["b", "a"])
    assert found is not None
    assert found.id == "c-1"

    assert await storage.find_conversation("other", {"a", "b"}) is None
    assert await storage.find_conversation("p", {"a", "c"}) is None


@pytest.mark.asyncio
async def test_find_conversation_skips_joined_participants(storage):
    """Test participants folded in by the engine do not change the dedup key."""
    await storage.save_conversation(
        Conversation(
            id="c-1",
            participant_ids=["a", "b", "agent"],
            joined_participant_ids=["agent"],
            property_id="p",
        )
    )

    found = await storage.find_conversation("p", {"a", "b"})
    assert found is not None
    assert found.id == "c-1"


@pytest.mark.asyncio
async def test_list_conversations_for_user(storage):
    """Test filtering conversations by participant."""
    await storage.save_conversation(Conversation(id="c-1", participant_ids=["a", "b"]))
    await storage.save_conversation(Conversation(id="c-2", participant_ids=["a", "c"]))

    assert [c.id for c in await storage.list_conversations(user_id="a")] == ["c-2", "c-1"]
    assert [c.id for c in await storage.list_conversations(user_id="b")] == ["c-1"]


@pytest.mark.asyncio
async def test_save_conversation_uses_injected_clock(storage, clock):
    """Test saving stamps updated_at from the store clock."""
    conv = await storage.save_conversation(Conversation(id="c-1", participant_ids=["a", "b"]))
    assert conv.updated_at == clock.current


@pytest.mark.asyncio
async def test_list_tours_for_user(storage):
    """Test tours are found for both the renter and the agent."""
    await storage.save_tour(
        ScheduledTour(id="t-1", property_id="p", renter_id="r", agent_id="a")
    )

    assert len(await storage.list_tours(user_id="r")) == 1
    assert len(await storage.list_tours(user_id="a")) == 1
    assert await storage.list_tours(user_id="x") == []


@pytest.mark.asyncio
async def test_list_notifications_for_recipient(storage):
    """Test notifications are listed newest first per recipient."""
    for i, recipient in enumerate(["a", "b", "a"]):
        await storage.save_notification(
            Notification(id=f"n-{i}", message="hi", type=NotificationType.LIKE, recipient_id=recipient)
        )

    assert [n.id for n in await storage.list_notifications(recipient_id="a")] == ["n-2", "n-0"]
    assert len(await storage.list_notifications()) == 3


@pytest.mark.asyncio
async def test_injected_id_factory(clock):
    """Test ids come from the injected factory."""
    from edqorta.storage.memory import InMemoryStorage

    counter = iter(range(100))
    storage = InMemoryStorage(id_factory=lambda: f"id-{next(counter)}", clock=clock)

    assert storage.new_id() == "id-0"
    assert storage.new_id() == "id-1"


@pytest.mark.asyncio
async def test_seed_demo_data(storage):
    """Test the development seed creates a listing the demo agent verified."""
    prop = await storage.seed_demo_data()

    assert prop.has_coordinates
    assert (await storage.get_user("demo-agent")).is_verified_agent
    assert prop.verification_status == VerificationStatus.VERIFIED
    assert prop.tour_agent_id == "demo-agent"
    assert prop.verification_fee == 25_000
    assert len(await storage.list_users()) == 3

    await storage.clear_all()
    assert await storage.list_properties() == []
