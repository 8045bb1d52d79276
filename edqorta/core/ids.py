"""Id and timestamp sources injected into the store."""

from collections.abc import Callable
from datetime import datetime, timezone
from uuid import uuid4

IdFactory = Callable[[], str]
Clock = Callable[[], datetime]


def new_id() -> str:
    """Mint a collision-free entity id."""
    return str(uuid4())


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)
