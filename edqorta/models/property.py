"""Property listing and verification models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from edqorta.core.ids import utcnow


class VerificationStatus(str, Enum):
    """Verification state of a listing."""

    UNVERIFIED = "unverified"
    PENDING = "pending"
    VERIFIED = "verified"


class RecordStatus(str, Enum):
    """Review state of submitted evidence."""

    PENDING = "pending"
    APPROVED = "approved"


class GeoReading(BaseModel):
    """A location sample captured on the verifier's device."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    accuracy: float = Field(default=0.0, ge=0)  # Informational only
    timestamp: datetime = Field(default_factory=utcnow)


class VerificationSubmission(BaseModel):
    """Evidence a verifier submits from the property's address."""

    submitter_id: str
    photos: list[str] = Field(default_factory=list)
    geolocation: GeoReading
    notes: str = ""


class VerificationRecord(BaseModel):
    """Submitted evidence attached to a property while it awaits review."""

    verifier_id: str
    photos: list[str]
    geolocation: GeoReading
    notes: str = ""
    distance_meters: float
    submitted_at: datetime
    status: RecordStatus = RecordStatus.PENDING


class Property(BaseModel):
    """A property post owned by exactly one lister."""

    id: str = Field(..., description="Unique property identifier")
    lister_id: str = Field(..., description="User who posted the listing")

    location: str = Field(..., description="Human-readable address")
    description: str = ""
    price: float | None = None
    beds: int | None = None
    baths: int | None = None
    verification_fee: float | None = Field(default=None, ge=0)  # Paid to the verifier

    # Ground truth for the geofence check
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)

    # Verification
    verification_status: VerificationStatus = VerificationStatus.UNVERIFIED
    verifier_id: str | None = None
    verification_data: VerificationRecord | None = None
    verification_completed_at: datetime | None = None

    # Engagement counters
    likes: int = 0
    comments: int = 0
    reposts: int = 0
    views: int = 0

    created_at: datetime = Field(default_factory=utcnow)

    @property
    def has_coordinates(self) -> bool:
        """Check if the listing carries a location for the geofence."""
        return self.latitude is not None and self.longitude is not None

    @property
    def tour_agent_id(self) -> str:
        """User expected to conduct tours: the verifier, else the lister."""
        return self.verifier_id or self.lister_id
