"""Tour endpoints - requests, bookings and confirmations."""

from datetime import date, datetime, time

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from edqorta.api.dependencies import ToursDep
from edqorta.models import ScheduledTour

router = APIRouter(prefix="/tours", tags=["Tours"])


# ==================== Pydantic Schemas ====================


class TourRequest(BaseModel):
    """Schema for requesting a tour at one of several times."""

    property_id: str
    renter_id: str
    proposed_times: list[datetime] = Field(..., min_length=1)


class TourBooking(BaseModel):
    """Schema for booking a single tour slot."""

    property_id: str
    requester_id: str
    requested_date: date
    requested_time: time
    message: str = ""


class TourConfirm(BaseModel):
    confirmed_time: datetime


class TourCancel(BaseModel):
    actor_id: str


# ==================== Tour Endpoints ====================


@router.post("", response_model=ScheduledTour, status_code=status.HTTP_201_CREATED)
async def request_tour(data: TourRequest, tours: ToursDep) -> ScheduledTour:
    return await tours.request_tour(data.property_id, data.renter_id, data.proposed_times)


@router.post("/bookings", response_model=ScheduledTour, status_code=status.HTTP_201_CREATED)
async def book_tour(data: TourBooking, tours: ToursDep) -> ScheduledTour:
    return await tours.book_tour(
        data.property_id,
        data.requester_id,
        data.requested_date,
        data.requested_time,
        message=data.message,
    )


@router.get("", response_model=list[ScheduledTour])
async def list_tours(tours: ToursDep, user_id: str | None = None) -> list[ScheduledTour]:
    """List tours, optionally those involving one user."""
    return await tours.list_for_user(user_id)


@router.get("/{tour_id}", response_model=ScheduledTour)
async def get_tour(tour_id: str, tours: ToursDep) -> ScheduledTour:
    return await tours.get(tour_id)


@router.post("/{tour_id}/confirm", response_model=ScheduledTour)
async def confirm_tour(tour_id: str, data: TourConfirm, tours: ToursDep) -> ScheduledTour:
    return await tours.confirm_tour(tour_id, data.confirmed_time)


@router.post("/{tour_id}/cancel", response_model=ScheduledTour)
async def cancel_tour(tour_id: str, data: TourCancel, tours: ToursDep) -> ScheduledTour:
    return await tours.cancel_tour(tour_id, data.actor_id)


@router.post("/{tour_id}/complete", response_model=ScheduledTour)
async def complete_tour(tour_id: str, tours: ToursDep) -> ScheduledTour:
    return await tours.complete_tour(tour_id)
