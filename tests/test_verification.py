"""Tests for geofenced property verification."""

import math

import pytest

from edqorta.core.exceptions import (
    AlreadyPending,
    InvalidState,
    MissingEvidence,
    NotFound,
    OutOfRange,
    ValidationError,
)
from edqorta.models import (
    GeoReading,
    Property,
    RecordStatus,
    VerificationStatus,
    VerificationSubmission,
)
from edqorta.services.verification import (
    EARTH_RADIUS_METERS,
    haversine_distance,
    within_geofence,
)

LAGOS_LAT = 6.5244
LAGOS_LNG = 3.3792

METERS_PER_DEGREE = EARTH_RADIUS_METERS * math.pi / 180


def submission_at(lat, lng, photos=("https://cdn.example.com/p/1.jpg",), accuracy=5.0):
    return VerificationSubmission(
        submitter_id="agent-1",
        photos=list(photos),
        geolocation=GeoReading(latitude=lat, longitude=lng, accuracy=accuracy),
        notes="Gate code 1234",
    )


def north_of_listing(meters):
    return submission_at(LAGOS_LAT + meters / METERS_PER_DEGREE, LAGOS_LNG)


class TestGeofence:
    """Distance and boundary checks."""

    def test_same_point_is_zero(self):
        assert haversine_distance(LAGOS_LAT, LAGOS_LNG, LAGOS_LAT, LAGOS_LNG) == 0.0

    def test_one_degree_of_latitude(self):
        distance = haversine_distance(0.0, 0.0, 1.0, 0.0)
        assert distance == pytest.approx(METERS_PER_DEGREE)

    def test_boundary_is_inclusive(self):
        assert within_geofence(0.5, 0.5)
        assert not within_geofence(0.5000001, 0.5)

    def test_example_readings(self):
        far = haversine_distance(6.52441, 3.37921, LAGOS_LAT, LAGOS_LNG)
        assert far > 1.0
        assert haversine_distance(6.52440, 3.37920, LAGOS_LAT, LAGOS_LNG) < 0.5


@pytest.mark.asyncio
async def test_submit_at_listing(engine, sink, listing, agent, lister):
    """Test a verifier standing on the pin moves the property to pending."""
    prop = await engine.verification.submit_verification(
        listing.id, agent.id, submission_at(LAGOS_LAT, LAGOS_LNG)
    )

    assert prop.verification_status == VerificationStatus.PENDING
    assert prop.verification_data.verifier_id == agent.id
    assert prop.verification_data.distance_meters == 0.0
    assert prop.verification_data.status == RecordStatus.PENDING
    assert prop.verifier_id is None

    assert len(sink.delivered) == 1
    assert sink.delivered[0].recipient_id == lister.id
    assert sink.delivered[0].message == (
        "Verification submitted for your property: 12 Admiralty Way, Lekki"
    )


@pytest.mark.asyncio
async def test_submit_just_inside_geofence(engine, listing, agent):
    prop = await engine.verification.submit_verification(
        listing.id, agent.id, north_of_listing(0.49)
    )

    assert prop.verification_data.distance_meters == pytest.approx(0.49, abs=1e-6)


@pytest.mark.asyncio
async def test_submit_just_outside_geofence(engine, sink, listing, agent):
    with pytest.raises(OutOfRange) as exc_info:
        await engine.verification.submit_verification(listing.id, agent.id, north_of_listing(0.51))

    assert exc_info.value.details["limit_meters"] == 0.5
    assert "within 0.5m" in exc_info.value.message
    assert (await engine.storage.get_property(listing.id)).verification_status == (
        VerificationStatus.UNVERIFIED
    )
    assert sink.delivered == []


@pytest.mark.asyncio
async def test_accuracy_does_not_widen_geofence(engine, listing, agent):
    reading = submission_at(6.52441, 3.37921, accuracy=50.0)

    with pytest.raises(OutOfRange):
        await engine.verification.submit_verification(listing.id, agent.id, reading)

    prop = await engine.verification.submit_verification(
        listing.id, agent.id, submission_at(6.52440, 3.37920)
    )
    assert prop.verification_status == VerificationStatus.PENDING


@pytest.mark.asyncio
async def test_submit_without_photos(engine, sink, listing, agent):
    with pytest.raises(MissingEvidence):
        await engine.verification.submit_verification(
            listing.id, agent.id, submission_at(LAGOS_LAT, LAGOS_LNG, photos=())
        )

    assert sink.delivered == []


@pytest.mark.asyncio
async def test_submit_twice_is_already_pending(engine, listing, agent):
    await engine.verification.submit_verification(
        listing.id, agent.id, submission_at(LAGOS_LAT, LAGOS_LNG)
    )

    with pytest.raises(AlreadyPending):
        await engine.verification.submit_verification(
            listing.id, agent.id, submission_at(LAGOS_LAT, LAGOS_LNG)
        )


@pytest.mark.asyncio
async def test_submit_for_listing_without_coordinates(engine, storage, lister, agent):
    await storage.save_property(Property(id="prop-2", lister_id=lister.id, location="Somewhere"))

    with pytest.raises(ValidationError):
        await engine.verification.submit_verification(
            "prop-2", agent.id, submission_at(LAGOS_LAT, LAGOS_LNG)
        )


@pytest.mark.asyncio
async def test_submit_for_unknown_entities(engine, listing, agent):
    with pytest.raises(NotFound):
        await engine.verification.submit_verification(
            "missing", agent.id, submission_at(LAGOS_LAT, LAGOS_LNG)
        )
    with pytest.raises(NotFound):
        await engine.verification.submit_verification(
            listing.id, "ghost", submission_at(LAGOS_LAT, LAGOS_LNG)
        )


@pytest.mark.asyncio
async def test_finalize_assigns_verifier(engine, sink, clock, listing, agent, lister):
    """Test finalizing makes the submitting agent the tour agent."""
    await engine.verification.submit_verification(
        listing.id, agent.id, submission_at(LAGOS_LAT, LAGOS_LNG)
    )
    assert [p.id for p in await engine.verification.assigned_to(agent.id)] == [listing.id]
    clock.advance(hours=2)

    prop = await engine.verification.finalize_verification(listing.id)

    assert prop.verification_status == VerificationStatus.VERIFIED
    assert prop.verifier_id == agent.id
    assert prop.tour_agent_id == agent.id
    assert prop.verification_completed_at == clock.current
    assert prop.verification_data.status == RecordStatus.APPROVED
    assert sink.delivered[-1].recipient_id == lister.id
    assert await engine.verification.assigned_to(agent.id) == []

    with pytest.raises(InvalidState):
        await engine.verification.submit_verification(
            listing.id, agent.id, submission_at(LAGOS_LAT, LAGOS_LNG)
        )


@pytest.mark.asyncio
async def test_finalize_requires_pending(engine, sink, listing, agent):
    with pytest.raises(InvalidState):
        await engine.verification.finalize_verification(listing.id)

    await engine.verification.submit_verification(
        listing.id, agent.id, submission_at(LAGOS_LAT, LAGOS_LNG)
    )
    await engine.verification.finalize_verification(listing.id)
    delivered = len(sink.delivered)

    with pytest.raises(InvalidState):
        await engine.verification.finalize_verification(listing.id)

    assert len(sink.delivered) == delivered


@pytest.mark.asyncio
async def test_completed_verifications_and_earnings(engine, storage, lister, listing, agent):
    """Test finalized verifications pay the verifier their fees."""
    second = await engine.engagement.create_listing(
        lister.id,
        "3 Ozumba Mbadiwe, Victoria Island",
        latitude=LAGOS_LAT,
        longitude=LAGOS_LNG,
        verification_fee=15_000,
    )
    listing.verification_fee = 25_000
    await storage.save_property(listing)

    for prop_id in (listing.id, second.id):
        await engine.verification.submit_verification(
            prop_id, agent.id, submission_at(LAGOS_LAT, LAGOS_LNG)
        )
    assert await engine.verification.completed_by(agent.id) == []
    assert await engine.verification.earnings(agent.id) == 0

    await engine.verification.finalize_verification(listing.id)

    assert [p.id for p in await engine.verification.completed_by(agent.id)] == [listing.id]
    assert await engine.verification.earnings(agent.id) == 25_000

    await engine.verification.finalize_verification(second.id)

    assert {p.id for p in await engine.verification.completed_by(agent.id)} == {
        listing.id,
        second.id,
    }
    assert await engine.verification.earnings(agent.id) == 40_000
    assert await engine.verification.earnings(lister.id) == 0


@pytest.mark.asyncio
async def test_earnings_without_fee(engine, listing, agent):
    await engine.verification.submit_verification(
        listing.id, agent.id, submission_at(LAGOS_LAT, LAGOS_LNG)
    )
    await engine.verification.finalize_verification(listing.id)

    assert len(await engine.verification.completed_by(agent.id)) == 1
    assert await engine.verification.earnings(agent.id) == 0


def test_engine_rejects_non_positive_radius(storage):
    from edqorta.core.exceptions import ConfigurationError
    from edqorta.services.engine import WorkflowEngine

    with pytest.raises(ConfigurationError):
        WorkflowEngine.build(storage, geofence_radius_meters=0)
