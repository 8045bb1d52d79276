"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from edqorta.api.main import create_app
from edqorta.models import AgentStatus, Property, User
from edqorta.services.engine import WorkflowEngine
from edqorta.services.notifications.sinks import CollectingSink
from edqorta.storage.memory import InMemoryStorage

LAGOS_LAT = 6.5244
LAGOS_LNG = 3.3792


class FakeClock:
    """Deterministic clock that tests can move forward."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 1, 15, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def storage(clock):
    """Create in-memory storage for tests."""
    return InMemoryStorage(clock=clock)


@pytest.fixture
def sink():
    return CollectingSink()


@pytest.fixture
def engine(storage, sink):
    """Create a workflow engine over the test storage."""
    return WorkflowEngine.build(
        storage,
        sinks=[sink],
        reject_past_tours=True,
        geofence_radius_meters=0.5,
    )


@pytest_asyncio.fixture
async def lister(storage):
    return await storage.save_user(User(id="lister-1", name="Ada Lister"))


@pytest_asyncio.fixture
async def renter(storage):
    return await storage.save_user(User(id="renter-1", name="Chidi Renter"))


@pytest_asyncio.fixture
async def agent(storage):
    return await storage.save_user(
        User(id="agent-1", name="Tunde Agent", agent_status=AgentStatus.VERIFIED)
    )


@pytest_asyncio.fixture
async def listing(storage, lister):
    """An unverified Lagos listing with coordinates."""
    return await storage.save_property(
        Property(
            id="prop-1",
            lister_id=lister.id,
            location="12 Admiralty Way, Lekki",
            latitude=LAGOS_LAT,
            longitude=LAGOS_LNG,
        )
    )


@pytest.fixture
def app(storage):
    """Create test application."""
    return create_app(storage)


@pytest_asyncio.fixture
async def client(app):
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
