"""Data models for the workflow engine."""

from edqorta.models.conversation import Conversation, DealStatus
from edqorta.models.message import (
    AudioClip,
    AudioContent,
    Message,
    MessageContent,
    MessageType,
    TextContent,
)
from edqorta.models.notification import Notification, NotificationType
from edqorta.models.property import (
    GeoReading,
    Property,
    RecordStatus,
    VerificationRecord,
    VerificationStatus,
    VerificationSubmission,
)
from edqorta.models.tour import ScheduledTour, TourStatus
from edqorta.models.user import AgentStatus, BusinessStatus, Review, User

__all__ = [
    # User
    "User",
    "Review",
    "AgentStatus",
    "BusinessStatus",
    # Property
    "Property",
    "VerificationStatus",
    "VerificationRecord",
    "VerificationSubmission",
    "RecordStatus",
    "GeoReading",
    # Conversation
    "Conversation",
    "DealStatus",
    # Message
    "Message",
    "MessageType",
    "MessageContent",
    "TextContent",
    "AudioContent",
    "AudioClip",
    # Tour
    "ScheduledTour",
    "TourStatus",
    # Notification
    "Notification",
    "NotificationType",
]
