"""Tests for the deal lifecycle."""

import pytest

from edqorta.core.exceptions import InvalidState, NotFound, ValidationError
from edqorta.models import DealStatus, NotificationType, User
from edqorta.services.conversation.deals import DEAL_TRANSITIONS, can_transition


@pytest.fixture
def conversation_factory(engine, listing, lister, renter):
    async def _create():
        return await engine.conversations.find_or_create(listing.id, renter.id, lister.id)

    return _create


def test_transition_map_only_moves_forward():
    assert can_transition(None, DealStatus.AGREEMENT_PENDING)
    assert can_transition(DealStatus.AGREEMENT_PENDING, DealStatus.COMPLETE)
    assert not can_transition(DealStatus.COMPLETE, DealStatus.AGREEMENT_PENDING)
    assert not can_transition(None, DealStatus.COMPLETE)
    assert DEAL_TRANSITIONS[DealStatus.COMPLETE] == set()


@pytest.mark.asyncio
async def test_payment_then_agreement(engine, sink, conversation_factory, lister, renter):
    """Test the happy path notifies the payer and then the lister."""
    conv = await conversation_factory()

    paid = await engine.deals.record_payment(conv.id, payer_id=renter.id)
    assert paid.deal_status == DealStatus.AGREEMENT_PENDING

    signed = await engine.deals.sign_agreement(conv.id)
    assert signed.deal_status == DealStatus.COMPLETE

    assert [n.recipient_id for n in sink.delivered] == [renter.id, lister.id]
    assert all(n.type == NotificationType.DEAL for n in sink.delivered)
    assert sink.delivered[0].message == (
        "Your payment for 12 Admiralty Way, Lekki was successful. Please review the agreement."
    )
    assert sink.delivered[1].message == (
        "Deal for 12 Admiralty Way, Lekki is complete! Funds have been released to the lister."
    )
    assert all(n.context_id == conv.id for n in sink.delivered)


@pytest.mark.asyncio
async def test_payment_defaults_to_renter(engine, sink, conversation_factory, renter):
    conv = await conversation_factory()

    await engine.deals.record_payment(conv.id)

    assert sink.delivered[0].recipient_id == renter.id


@pytest.mark.asyncio
async def test_open_deal_then_payment(engine, sink, conversation_factory, renter):
    """Test the explicit payment_pending step."""
    conv = await conversation_factory()

    opened = await engine.deals.open_deal(conv.id)
    assert opened.deal_status == DealStatus.PAYMENT_PENDING
    assert sink.delivered[0].message == "Payment requested for 12 Admiralty Way, Lekki."

    paid = await engine.deals.record_payment(conv.id)
    assert paid.deal_status == DealStatus.AGREEMENT_PENDING


@pytest.mark.asyncio
async def test_sign_without_payment_is_rejected(engine, sink, conversation_factory):
    conv = await conversation_factory()

    with pytest.raises(InvalidState):
        await engine.deals.sign_agreement(conv.id)

    assert (await engine.storage.get_conversation(conv.id)).deal_status is None
    assert sink.delivered == []


@pytest.mark.asyncio
async def test_no_regression_after_completion(engine, sink, conversation_factory):
    """Test a completed deal can't be paid or signed again."""
    conv = await conversation_factory()
    await engine.deals.record_payment(conv.id)
    await engine.deals.sign_agreement(conv.id)

    with pytest.raises(InvalidState):
        await engine.deals.record_payment(conv.id)
    with pytest.raises(InvalidState):
        await engine.deals.sign_agreement(conv.id)
    with pytest.raises(InvalidState):
        await engine.deals.open_deal(conv.id)

    assert (await engine.storage.get_conversation(conv.id)).deal_status == DealStatus.COMPLETE
    assert len(sink.delivered) == 2


@pytest.mark.asyncio
async def test_double_payment_is_rejected(engine, conversation_factory):
    conv = await conversation_factory()
    await engine.deals.record_payment(conv.id)

    with pytest.raises(InvalidState):
        await engine.deals.record_payment(conv.id)


@pytest.mark.asyncio
async def test_deal_needs_property_anchor(engine, lister, renter):
    """Test team threads without a property can't carry a deal."""
    team = await engine.conversations.create_team_conversation("team-1", [renter.id, lister.id])

    with pytest.raises(InvalidState) as exc_info:
        await engine.deals.record_payment(team.id)
    assert exc_info.value.code == "INVALID_STATE"


@pytest.mark.asyncio
async def test_unknown_conversation(engine):
    with pytest.raises(NotFound):
        await engine.deals.record_payment("nope")


@pytest.mark.asyncio
async def test_payment_by_outsider_is_rejected(engine, sink, storage, conversation_factory):
    """Test a user outside the thread can't advance its deal."""
    conv = await conversation_factory()
    await storage.save_user(User(id="stranger", name="Random Person"))

    with pytest.raises(NotFound) as exc_info:
        await engine.deals.record_payment(conv.id, payer_id="stranger")

    assert exc_info.value.details == {"entity": "participant", "id": "stranger"}
    assert (await storage.get_conversation(conv.id)).deal_status is None
    assert sink.delivered == []


@pytest.mark.asyncio
async def test_payment_by_lister_is_rejected(engine, sink, storage, conversation_factory, lister):
    conv = await conversation_factory()

    with pytest.raises(ValidationError):
        await engine.deals.record_payment(conv.id, payer_id=lister.id)

    assert (await storage.get_conversation(conv.id)).deal_status is None
    assert sink.delivered == []


@pytest.mark.asyncio
async def test_payment_by_folded_agent_is_rejected(engine, conversation_factory, agent):
    conv = await conversation_factory()
    await engine.conversations.add_system_participant(conv.id, agent.id)

    with pytest.raises(NotFound):
        await engine.deals.record_payment(conv.id, payer_id=agent.id)


@pytest.fixture
def completed_deal(engine, conversation_factory):
    async def _complete():
        conv = await conversation_factory()
        await engine.deals.record_payment(conv.id)
        await engine.deals.sign_agreement(conv.id)
        return conv

    return _complete


@pytest.mark.asyncio
async def test_both_sides_review_once(engine, sink, storage, completed_deal, lister, renter):
    """Test renter and lister each review the other after completion."""
    conv = await completed_deal()
    delivered = len(sink.delivered)

    review = await engine.deals.leave_review(conv.id, renter.id, 5, text=" Smooth handover ")
    await engine.deals.leave_review(conv.id, lister.id, 4)

    assert review.rating == 5
    assert review.text == "Smooth handover"
    assert [r.reviewer_id for r in (await storage.get_user(lister.id)).reviews] == [renter.id]
    assert [r.reviewer_id for r in (await storage.get_user(renter.id)).reviews] == [lister.id]

    notes = sink.delivered[delivered:]
    assert [(n.recipient_id, n.message) for n in notes] == [
        (lister.id, "Chidi Renter left you a 5-star review."),
        (renter.id, "Ada Lister left you a 4-star review."),
    ]
    assert all(n.type == NotificationType.DEAL for n in notes)

    with pytest.raises(InvalidState):
        await engine.deals.leave_review(conv.id, renter.id, 1)
    assert len(sink.delivered) == delivered + 2
    assert len((await storage.get_user(lister.id)).reviews) == 1


@pytest.mark.asyncio
async def test_review_before_completion_is_rejected(engine, sink, conversation_factory, renter):
    conv = await conversation_factory()
    await engine.deals.record_payment(conv.id)
    delivered = len(sink.delivered)

    with pytest.raises(InvalidState):
        await engine.deals.leave_review(conv.id, renter.id, 5)

    assert len(sink.delivered) == delivered


@pytest.mark.asyncio
async def test_review_validation(engine, completed_deal, renter, agent):
    conv = await completed_deal()

    with pytest.raises(ValidationError):
        await engine.deals.leave_review(conv.id, renter.id, 6)
    with pytest.raises(NotFound):
        await engine.deals.leave_review(conv.id, agent.id, 5)
