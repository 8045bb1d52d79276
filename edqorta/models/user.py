"""User models for listers, renters and agents."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from edqorta.core.ids import utcnow


class AgentStatus(str, Enum):
    """Agent credential status."""

    NONE = "none"
    PENDING = "pending"
    VERIFIED = "verified"


class BusinessStatus(str, Enum):
    """Business account status."""

    NONE = "none"
    PENDING = "pending"
    VERIFIED = "verified"


class Review(BaseModel):
    """A rating one side of a completed deal leaves for the other."""

    id: str = Field(..., description="Unique review identifier")
    reviewer_id: str
    conversation_id: str = Field(..., description="Deal thread the review belongs to")
    rating: int = Field(..., ge=1, le=5)
    text: str = ""
    timestamp: datetime = Field(default_factory=utcnow)


class User(BaseModel):
    """A member of the feed.

    Users are created at signup and never deleted by the engine.
    """

    id: str = Field(..., description="Unique user identifier")
    name: str = Field(..., description="Display name")
    username: str = ""

    agent_status: AgentStatus = AgentStatus.NONE
    business_status: BusinessStatus = BusinessStatus.NONE

    # Social graph
    follower_ids: set[str] = Field(default_factory=set)
    following_ids: set[str] = Field(default_factory=set)
    liked_property_ids: set[str] = Field(default_factory=set)

    reviews: list[Review] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=utcnow)

    @property
    def is_verified_agent(self) -> bool:
        """Check if the user holds a verified agent credential."""
        return self.agent_status == AgentStatus.VERIFIED
