"""Tour scheduling models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from edqorta.core.ids import utcnow


class TourStatus(str, Enum):
    """Lifecycle of a tour request."""

    PENDING = "pending"  # Waiting for the agent to pick a time
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class ScheduledTour(BaseModel):
    """An in-person visit negotiated between a renter and an agent."""

    id: str = Field(..., description="Unique tour identifier")
    property_id: str
    renter_id: str = Field(..., description="User requesting the tour")
    agent_id: str = Field(..., description="User expected to conduct the tour")

    proposed_times: list[datetime] = Field(default_factory=list)
    confirmed_time: datetime | None = None
    status: TourStatus = TourStatus.PENDING

    # Direct-booking path
    message: str = ""
    participant_ids: list[str] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def involves(self, user_id: str) -> bool:
        return user_id in (self.renter_id, self.agent_id) or user_id in self.participant_ids
