"""Deal lifecycle - payment, agreement and reviews on a property inquiry thread."""

import structlog

from edqorta.core.exceptions import InvalidState, NotFound, ValidationError
from edqorta.models import Conversation, DealStatus, NotificationType, Property, Review
from edqorta.services.notifications.center import NotificationCenter
from edqorta.storage.base import StorageBackend

logger = structlog.get_logger()


# from_status -> to_status; None is "no deal in progress"
DEAL_TRANSITIONS: dict[DealStatus | None, set[DealStatus]] = {
    None: {DealStatus.PAYMENT_PENDING, DealStatus.AGREEMENT_PENDING},
    DealStatus.PAYMENT_PENDING: {DealStatus.AGREEMENT_PENDING},
    DealStatus.AGREEMENT_PENDING: {DealStatus.COMPLETE},
    DealStatus.COMPLETE: set(),
}


def can_transition(current: DealStatus | None, target: DealStatus) -> bool:
    """Check whether a deal may move from ``current`` to ``target``."""
    return target in DEAL_TRANSITIONS[current]


class DealLifecycle:
    """Advances a conversation's deal strictly forward.

    ``record_payment`` is accepted straight from "no deal", folding the
    payment and agreement-review steps into one transition. ``open_deal``
    models the intermediate ``payment_pending`` state for callers that want
    it to be observable.
    """

    def __init__(self, storage: StorageBackend, notifications: NotificationCenter) -> None:
        self.storage = storage
        self.notifications = notifications

    async def open_deal(self, conversation_id: str) -> Conversation:
        """Start a deal; the renter is asked to pay."""
        async with self.storage.lock:
            conversation, prop = await self._load(conversation_id, "open deal on")
            self._advance(conversation, DealStatus.PAYMENT_PENDING, "open deal on")

            await self.storage.save_conversation(conversation)
            await self.notifications.emit(
                f"Payment requested for {prop.location}.",
                NotificationType.DEAL,
                context_id=conversation.id,
                recipient_id=self._renter_id(conversation, prop),
            )
            self._log_transition(conversation)
            return conversation

    async def record_payment(
        self,
        conversation_id: str,
        payer_id: str | None = None,
    ) -> Conversation:
        """Confirm the payer's payment and move the deal to agreement review.

        Args:
            conversation_id: Inquiry thread carrying the deal
            payer_id: Paying participant; defaults to the non-lister principal

        Returns:
            Updated Conversation

        Raises:
            NotFound: If the conversation does not exist, or the payer is not
                one of its principal participants
            ValidationError: If the payer is the lister
            InvalidState: If there is no property anchor, or payment was
                already recorded
        """
        async with self.storage.lock:
            conversation, prop = await self._load(conversation_id, "record payment on")
            if payer_id is not None:
                await self.storage.require_user(payer_id)
                if payer_id not in conversation.principal_ids:
                    raise NotFound("participant", payer_id)
                if payer_id == prop.lister_id:
                    raise ValidationError(
                        "The lister cannot pay for their own listing",
                        details={"conversation_id": conversation.id, "payer_id": payer_id},
                    )
            self._advance(conversation, DealStatus.AGREEMENT_PENDING, "record payment on")

            await self.storage.save_conversation(conversation)
            await self.notifications.emit(
                f"Your payment for {prop.location} was successful. Please review the agreement.",
                NotificationType.DEAL,
                context_id=conversation.id,
                recipient_id=payer_id or self._renter_id(conversation, prop),
            )
            self._log_transition(conversation)
            return conversation

    async def sign_agreement(self, conversation_id: str) -> Conversation:
        """Sign the agreement, completing the deal and releasing funds."""
        async with self.storage.lock:
            conversation, prop = await self._load(conversation_id, "sign agreement on")
            self._advance(conversation, DealStatus.COMPLETE, "sign agreement on")

            await self.storage.save_conversation(conversation)
            await self.notifications.emit(
                f"Deal for {prop.location} is complete! Funds have been released to the lister.",
                NotificationType.DEAL,
                context_id=conversation.id,
                recipient_id=prop.lister_id,
            )
            self._log_transition(conversation)
            return conversation

    async def leave_review(
        self,
        conversation_id: str,
        reviewer_id: str,
        rating: int,
        text: str = "",
    ) -> Review:
        """Rate the other side of a completed deal. Each side reviews once.

        The renter reviews the lister and the lister reviews the renter;
        participants folded in later take no part.

        Raises:
            NotFound: If the conversation is unknown or the reviewer is not in it
            InvalidState: If the deal is not complete or the reviewer already
                left a review on it
            ValidationError: If the rating is outside 1-5
        """
        async with self.storage.lock:
            conversation, _ = await self._load(conversation_id, "review")
            reviewer = await self.storage.require_user(reviewer_id)
            if reviewer.id not in conversation.principal_ids:
                raise NotFound("participant", reviewer.id)
            if conversation.deal_status != DealStatus.COMPLETE:
                current = conversation.deal_status
                raise InvalidState(
                    "conversation",
                    conversation.id,
                    current.value if current else None,
                    "review",
                )
            if not 1 <= rating <= 5:
                raise ValidationError("Rating must be between 1 and 5", details={"rating": rating})

            reviewee_id = next(
                p
                for p in conversation.participant_ids
                if p in conversation.principal_ids and p != reviewer.id
            )
            reviewee = await self.storage.require_user(reviewee_id)
            if any(
                r.reviewer_id == reviewer.id and r.conversation_id == conversation.id
                for r in reviewee.reviews
            ):
                raise InvalidState("conversation", conversation.id, "reviewed", "review")

            review = Review(
                id=self.storage.new_id(),
                reviewer_id=reviewer.id,
                conversation_id=conversation.id,
                rating=rating,
                text=text.strip(),
                timestamp=self.storage.now(),
            )
            reviewee.reviews.append(review)
            await self.storage.save_user(reviewee)

            await self.notifications.emit(
                f"{reviewer.name} left you a {rating}-star review.",
                NotificationType.DEAL,
                context_id=conversation.id,
                recipient_id=reviewee.id,
            )

            logger.info(
                "Review left",
                conversation_id=conversation.id,
                reviewer_id=reviewer.id,
                reviewee_id=reviewee.id,
                rating=rating,
            )
            return review

    async def _load(self, conversation_id: str, operation: str) -> tuple[Conversation, Property]:
        conversation = await self.storage.require_conversation(conversation_id)
        if conversation.property_id is None:
            raise InvalidState(
                "conversation",
                conversation.id,
                "without property",
                operation,
            )
        prop = await self.storage.require_property(conversation.property_id)
        return conversation, prop

    def _advance(self, conversation: Conversation, target: DealStatus, operation: str) -> None:
        current = conversation.deal_status
        if not can_transition(current, target):
            logger.warning(
                "Rejected deal transition",
                conversation_id=conversation.id,
                current=current.value if current else None,
                target=target.value,
            )
            raise InvalidState(
                "conversation",
                conversation.id,
                current.value if current else None,
                operation,
            )
        conversation.deal_status = target

    @staticmethod
    def _renter_id(conversation: Conversation, prop: Property) -> str | None:
        """First principal participant who is not the lister."""
        for user_id in conversation.participant_ids:
            if user_id != prop.lister_id and user_id in conversation.principal_ids:
                return user_id
        return None

    @staticmethod
    def _log_transition(conversation: Conversation) -> None:
        logger.info(
            "Deal advanced",
            conversation_id=conversation.id,
            deal_status=conversation.deal_status.value if conversation.deal_status else None,
        )
