"""Tour workflow - requests, bookings and confirmations."""

from datetime import date, datetime, time, timezone

import structlog

from edqorta.core.config import settings
from edqorta.core.exceptions import InvalidState, ValidationError
from edqorta.models import (
    Conversation,
    NotificationType,
    Property,
    ScheduledTour,
    TourStatus,
)
from edqorta.services.conversation.manager import ConversationManager
from edqorta.services.notifications.center import NotificationCenter
from edqorta.storage.base import StorageBackend

logger = structlog.get_logger()


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with the store clock."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_slot(value: datetime) -> str:
    return f"{value:%a %d %b %Y, %H:%M}"


class TourWorkflow:
    """Creates tour requests and moves them through their lifecycle.

    Two request shapes feed one lifecycle: ``request_tour`` with several
    proposed times, and ``book_tour`` with a single date and time slot.
    The agent for a tour is the property's verifier, else its lister.
    """

    def __init__(
        self,
        storage: StorageBackend,
        conversations: ConversationManager,
        notifications: NotificationCenter,
        reject_past_tours: bool | None = None,
    ) -> None:
        self.storage = storage
        self.conversations = conversations
        self.notifications = notifications
        self.reject_past_tours = (
            settings.reject_past_tours if reject_past_tours is None else reject_past_tours
        )

    async def request_tour(
        self,
        property_id: str,
        renter_id: str,
        proposed_times: list[datetime],
    ) -> ScheduledTour:
        """Ask the property's agent for a tour at one of several times.

        Args:
            property_id: Property to visit
            renter_id: User requesting the tour
            proposed_times: Candidate slots, kept in caller order

        Returns:
            The pending ScheduledTour

        Raises:
            NotFound: If the property or renter does not exist
            ValidationError: If no time is proposed or a time is in the past
        """
        async with self.storage.lock:
            prop = await self.storage.require_property(property_id)
            renter = await self.storage.require_user(renter_id)
            agent_id = prop.tour_agent_id
            await self.storage.require_user(agent_id)
            self._check_requester(prop, renter.id, agent_id)

            if not proposed_times:
                raise ValidationError("Propose at least one time for the tour")
            times = [as_utc(t) for t in proposed_times]
            self._check_future(times)

            tour = await self._create(prop, renter.id, agent_id, times)
            await self.notifications.emit(
                f"{renter.name} requested a tour for {prop.location}",
                NotificationType.TOUR,
                context_id=tour.id,
                recipient_id=agent_id,
            )

            logger.info(
                "Tour requested",
                tour_id=tour.id,
                property_id=prop.id,
                agent_id=agent_id,
                proposed=len(times),
            )
            return tour

    async def book_tour(
        self,
        property_id: str,
        requester_id: str,
        requested_date: date,
        requested_time: time,
        message: str = "",
    ) -> ScheduledTour:
        """Book a single slot directly; every participant but the requester is told."""
        async with self.storage.lock:
            prop = await self.storage.require_property(property_id)
            requester = await self.storage.require_user(requester_id)
            agent_id = prop.tour_agent_id
            await self.storage.require_user(agent_id)
            self._check_requester(prop, requester.id, agent_id)

            slot = as_utc(datetime.combine(requested_date, requested_time))
            self._check_future([slot])

            participant_ids = [prop.lister_id]
            if prop.verifier_id and prop.verifier_id != prop.lister_id:
                participant_ids.append(prop.verifier_id)
            participant_ids.append(requester.id)

            tour = await self._create(
                prop,
                requester.id,
                agent_id,
                [slot],
                message=message.strip(),
                participant_ids=participant_ids,
            )

            for participant_id in participant_ids:
                if participant_id == requester.id:
                    continue
                await self.notifications.emit(
                    f"New tour request for {prop.location} on "
                    f"{requested_date.isoformat()} at {requested_time:%H:%M}",
                    NotificationType.TOUR,
                    context_id=tour.id,
                    recipient_id=participant_id,
                )

            logger.info(
                "Tour booked",
                tour_id=tour.id,
                property_id=prop.id,
                participants=participant_ids,
            )
            return tour

    async def confirm_tour(self, tour_id: str, confirmed_time: datetime) -> ScheduledTour:
        """Confirm a pending tour for one time and bring the agent into the chat.

        Raises:
            NotFound: If the tour does not exist
            InvalidState: If the tour is no longer pending
            ValidationError: If the time was not one of the proposed slots
        """
        async with self.storage.lock:
            tour = await self.storage.require_tour(tour_id)
            if tour.status != TourStatus.PENDING:
                raise InvalidState("tour", tour.id, tour.status.value, "confirm")

            slot = as_utc(confirmed_time)
            if tour.proposed_times and slot not in tour.proposed_times:
                raise ValidationError(
                    "Confirmed time must be one of the proposed times",
                    details={"tour_id": tour.id, "confirmed_time": slot.isoformat()},
                )

            prop = await self.storage.require_property(tour.property_id)
            await self.storage.require_user(tour.agent_id)

            tour.status = TourStatus.CONFIRMED
            tour.confirmed_time = slot
            await self.storage.save_tour(tour)

            await self.notifications.emit(
                f"Tour for {prop.location} has been confirmed for {format_slot(slot)}",
                NotificationType.TOUR,
                context_id=tour.id,
                recipient_id=tour.renter_id,
            )

            thread = await self._renter_thread(prop.id, tour.renter_id)
            if thread is not None and not thread.has_participant(tour.agent_id):
                await self.conversations.fold_in(thread.id, tour.agent_id)

            logger.info(
                "Tour confirmed",
                tour_id=tour.id,
                confirmed_time=slot.isoformat(),
                conversation_id=thread.id if thread else None,
            )
            return tour

    async def cancel_tour(self, tour_id: str, actor_id: str) -> ScheduledTour:
        """Cancel a pending or confirmed tour and tell the other party."""
        async with self.storage.lock:
            tour = await self.storage.require_tour(tour_id)
            if actor_id not in (tour.renter_id, tour.agent_id):
                raise ValidationError(
                    "Only the renter or the agent can cancel a tour",
                    details={"tour_id": tour.id, "actor_id": actor_id},
                )
            if tour.status not in (TourStatus.PENDING, TourStatus.CONFIRMED):
                raise InvalidState("tour", tour.id, tour.status.value, "cancel")

            prop = await self.storage.require_property(tour.property_id)
            tour.status = TourStatus.CANCELLED
            await self.storage.save_tour(tour)

            other_id = tour.agent_id if actor_id == tour.renter_id else tour.renter_id
            await self.notifications.emit(
                f"Tour for {prop.location} has been cancelled",
                NotificationType.TOUR,
                context_id=tour.id,
                recipient_id=other_id,
            )

            logger.info("Tour cancelled", tour_id=tour.id, actor_id=actor_id)
            return tour

    async def complete_tour(self, tour_id: str) -> ScheduledTour:
        """Mark a confirmed tour as having taken place."""
        async with self.storage.lock:
            tour = await self.storage.require_tour(tour_id)
            if tour.status != TourStatus.CONFIRMED:
                raise InvalidState("tour", tour.id, tour.status.value, "complete")

            prop = await self.storage.require_property(tour.property_id)
            tour.status = TourStatus.COMPLETED
            await self.storage.save_tour(tour)

            await self.notifications.emit(
                f"Your tour of {prop.location} is complete",
                NotificationType.TOUR,
                context_id=tour.id,
                recipient_id=tour.renter_id,
            )

            logger.info("Tour completed", tour_id=tour.id)
            return tour

    async def get(self, tour_id: str) -> ScheduledTour:
        return await self.storage.require_tour(tour_id)

    async def list_for_user(self, user_id: str | None = None) -> list[ScheduledTour]:
        return await self.storage.list_tours(user_id=user_id)

    async def _create(
        self,
        prop: Property,
        renter_id: str,
        agent_id: str,
        times: list[datetime],
        message: str = "",
        participant_ids: list[str] | None = None,
    ) -> ScheduledTour:
        now = self.storage.now()
        tour = ScheduledTour(
            id=self.storage.new_id(),
            property_id=prop.id,
            renter_id=renter_id,
            agent_id=agent_id,
            proposed_times=times,
            status=TourStatus.PENDING,
            message=message,
            participant_ids=participant_ids or [],
            created_at=now,
            updated_at=now,
        )
        return await self.storage.save_tour(tour)

    async def _renter_thread(self, property_id: str, renter_id: str) -> Conversation | None:
        """Most recent inquiry thread the renter opened about the property."""
        for conversation in await self.storage.list_conversations(user_id=renter_id):
            if (
                not conversation.is_team
                and conversation.property_id == property_id
                and renter_id in conversation.principal_ids
            ):
                return conversation
        return None

    def _check_requester(self, prop: Property, requester_id: str, agent_id: str) -> None:
        if requester_id in (prop.lister_id, agent_id):
            raise ValidationError(
                "You cannot request a tour of a listing you manage",
                details={"property_id": prop.id, "user_id": requester_id},
            )

    def _check_future(self, times: list[datetime]) -> None:
        if not self.reject_past_tours:
            return
        now = self.storage.now()
        past = [t for t in times if t < now]
        if past:
            raise ValidationError(
                "Tour times must be in the future",
                details={"past_times": [t.isoformat() for t in past]},
            )
