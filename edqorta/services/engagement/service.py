"""Engagement service - listings, likes and follows."""

import structlog
from pydantic import ValidationError as PydanticValidationError

from edqorta.core.exceptions import ValidationError
from edqorta.models import NotificationType, Property, User, VerificationStatus
from edqorta.services.notifications.center import NotificationCenter
from edqorta.storage.base import StorageBackend

logger = structlog.get_logger()


class EngagementService:
    """Social-feed mutations that feed the notification center."""

    def __init__(self, storage: StorageBackend, notifications: NotificationCenter) -> None:
        self.storage = storage
        self.notifications = notifications

    async def register_user(self, user: User) -> User:
        async with self.storage.lock:
            if await self.storage.get_user(user.id) is not None:
                raise ValidationError("User already exists", details={"user_id": user.id})
            return await self.storage.save_user(user)

    async def create_listing(
        self,
        lister_id: str,
        location: str,
        *,
        description: str = "",
        price: float | None = None,
        beds: int | None = None,
        baths: int | None = None,
        verification_fee: float | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
        needs_agent: bool = True,
    ) -> Property:
        """Publish a property listing.

        A verified agent listing their own property without asking for
        another agent vouches for it directly.

        Raises:
            NotFound: If the lister does not exist
            ValidationError: If the location is empty or a field is out of range
        """
        async with self.storage.lock:
            lister = await self.storage.require_user(lister_id)
            if not location.strip():
                raise ValidationError("Listing location cannot be empty")

            try:
                prop = Property(
                    id=self.storage.new_id(),
                    lister_id=lister.id,
                    location=location.strip(),
                    description=description,
                    price=price,
                    beds=beds,
                    baths=baths,
                    verification_fee=verification_fee,
                    latitude=latitude,
                    longitude=longitude,
                    created_at=self.storage.now(),
                )
            except PydanticValidationError as e:
                raise ValidationError(
                    "Invalid listing",
                    details={"errors": e.errors(include_url=False, include_context=False)},
                ) from e

            if lister.is_verified_agent and not needs_agent:
                prop.verification_status = VerificationStatus.VERIFIED
                prop.verifier_id = lister.id
                prop.verification_completed_at = prop.created_at

            await self.storage.save_property(prop)

            logger.info(
                "Listing created",
                property_id=prop.id,
                lister_id=lister.id,
                verification_status=prop.verification_status.value,
            )
            return prop

    async def toggle_like(self, property_id: str, user_id: str) -> bool:
        """Like or unlike a property. Returns True when the property is now liked."""
        async with self.storage.lock:
            prop = await self.storage.require_property(property_id)
            user = await self.storage.require_user(user_id)

            if prop.id in user.liked_property_ids:
                user.liked_property_ids.discard(prop.id)
                prop.likes = max(prop.likes - 1, 0)
                liked = False
            else:
                user.liked_property_ids.add(prop.id)
                prop.likes += 1
                liked = True

            await self.storage.save_user(user)
            await self.storage.save_property(prop)

            if liked and user.id != prop.lister_id:
                await self.notifications.emit(
                    f"{user.name} liked your property: {prop.location}",
                    NotificationType.LIKE,
                    context_id=prop.id,
                    recipient_id=prop.lister_id,
                )

            logger.debug("Like toggled", property_id=prop.id, user_id=user.id, liked=liked)
            return liked

    async def follow(self, follower_id: str, followee_id: str) -> User:
        """Follow another user. Following twice changes nothing."""
        async with self.storage.lock:
            follower, followee = await self._pair(follower_id, followee_id)
            if followee.id in follower.following_ids:
                return follower

            follower.following_ids.add(followee.id)
            followee.follower_ids.add(follower.id)
            await self.storage.save_user(follower)
            await self.storage.save_user(followee)

            await self.notifications.emit(
                f"{follower.name} started following you",
                NotificationType.FOLLOW,
                context_id=follower.id,
                recipient_id=followee.id,
            )

            logger.info("User followed", follower_id=follower.id, followee_id=followee.id)
            return follower

    async def unfollow(self, follower_id: str, followee_id: str) -> User:
        async with self.storage.lock:
            follower, followee = await self._pair(follower_id, followee_id)
            follower.following_ids.discard(followee.id)
            followee.follower_ids.discard(follower.id)
            await self.storage.save_user(follower)
            await self.storage.save_user(followee)
            return follower

    async def _pair(self, follower_id: str, followee_id: str) -> tuple[User, User]:
        if follower_id == followee_id:
            raise ValidationError("You cannot follow yourself", details={"user_id": follower_id})
        follower = await self.storage.require_user(follower_id)
        followee = await self.storage.require_user(followee_id)
        return follower, followee
