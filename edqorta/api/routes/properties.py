"""Property endpoints - listings, likes and verification."""

from typing import Any

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from edqorta.api.dependencies import EngagementDep, StorageDep, VerificationDep
from edqorta.models import GeoReading, Property, VerificationSubmission

router = APIRouter(prefix="/properties", tags=["Properties"])


# ==================== Pydantic Schemas ====================


class PropertyCreate(BaseModel):
    """Schema for publishing a listing."""

    lister_id: str
    location: str
    description: str = ""
    price: float | None = None
    beds: int | None = None
    baths: int | None = None
    verification_fee: float | None = Field(default=None, ge=0)
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    needs_agent: bool = True


class LikeRequest(BaseModel):
    user_id: str


class VerificationRequest(BaseModel):
    """Schema for an on-site verification submission."""

    verifier_id: str
    photos: list[str] = Field(default_factory=list)
    geolocation: GeoReading
    notes: str = ""


# ==================== Property Endpoints ====================


@router.post("", response_model=Property, status_code=status.HTTP_201_CREATED)
async def create_property(data: PropertyCreate, engagement: EngagementDep) -> Property:
    """Publish a listing."""
    return await engagement.create_listing(**data.model_dump())


@router.get("", response_model=list[Property])
async def list_properties(storage: StorageDep, lister_id: str | None = None) -> list[Property]:
    """List properties, most recent first."""
    return await storage.list_properties(lister_id=lister_id)


@router.get("/{property_id}", response_model=Property)
async def get_property(property_id: str, storage: StorageDep) -> Property:
    """Get a specific property."""
    return await storage.require_property(property_id)


@router.post("/{property_id}/likes")
async def toggle_like(
    property_id: str,
    data: LikeRequest,
    engagement: EngagementDep,
) -> dict[str, Any]:
    """Like or unlike a property."""
    liked = await engagement.toggle_like(property_id, data.user_id)
    return {"property_id": property_id, "user_id": data.user_id, "liked": liked}


# ==================== Verification Endpoints ====================


@router.post("/{property_id}/verification", response_model=Property)
async def submit_verification(
    property_id: str,
    data: VerificationRequest,
    verification: VerificationDep,
) -> Property:
    """Submit on-site evidence for a property."""
    submission = VerificationSubmission(
        submitter_id=data.verifier_id,
        photos=data.photos,
        geolocation=data.geolocation,
        notes=data.notes,
    )
    return await verification.submit_verification(property_id, data.verifier_id, submission)


@router.post("/{property_id}/verification/finalize", response_model=Property)
async def finalize_verification(property_id: str, verification: VerificationDep) -> Property:
    """Accept the pending evidence for a property."""
    return await verification.finalize_verification(property_id)
