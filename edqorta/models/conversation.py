"""Conversation models for property inquiries and team threads."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from edqorta.core.ids import utcnow
from edqorta.models.message import Message


class DealStatus(str, Enum):
    """Progress of the deal attached to an inquiry thread.

    Transitions run strictly forward; ``None`` on the conversation means no
    deal is in progress.
    """

    PAYMENT_PENDING = "payment_pending"
    AGREEMENT_PENDING = "agreement_pending"
    COMPLETE = "complete"


class Conversation(BaseModel):
    """A message thread between users, optionally anchored to a property."""

    id: str = Field(..., description="Unique conversation identifier")
    participant_ids: list[str] = Field(default_factory=list)
    messages: list[Message] = Field(default_factory=list)

    property_id: str | None = None
    deal_status: DealStatus | None = None
    team_id: str | None = None  # Team threads bypass property dedup

    # Participants folded in by the engine rather than the original inquiry
    joined_participant_ids: list[str] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def is_team(self) -> bool:
        return self.team_id is not None

    @property
    def principal_ids(self) -> frozenset[str]:
        """Participants that define the thread's identity for dedup."""
        return frozenset(self.participant_ids) - frozenset(self.joined_participant_ids)

    @property
    def last_message(self) -> Message | None:
        return self.messages[-1] if self.messages else None

    def has_participant(self, user_id: str) -> bool:
        return user_id in self.participant_ids

    def unread_count(self, user_id: str) -> int:
        """Count unread messages sent by someone other than ``user_id``."""
        return sum(1 for m in self.messages if not m.read and m.sender_id != user_id)
