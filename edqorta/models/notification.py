"""Notification models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from edqorta.core.ids import utcnow


class NotificationType(str, Enum):
    """Kind of event that produced a notification."""

    MESSAGE = "message"
    VERIFICATION = "verification"
    DEAL = "deal"
    FOLLOW = "follow"
    TOUR = "tour"
    LIKE = "like"


class Notification(BaseModel):
    """A workflow-triggered event shown in a user's activity feed."""

    id: str = Field(..., description="Unique notification identifier")
    message: str
    type: NotificationType
    timestamp: datetime = Field(default_factory=utcnow)
    read: bool = False

    context_id: str | None = None  # Entity that triggered the event
    recipient_id: str | None = None
