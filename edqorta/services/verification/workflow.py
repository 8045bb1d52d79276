"""Verification workflow - on-site evidence and administrative acceptance."""

import structlog

from edqorta.core.config import settings
from edqorta.core.exceptions import (
    AlreadyPending,
    InvalidState,
    MissingEvidence,
    OutOfRange,
    ValidationError,
)
from edqorta.models import (
    NotificationType,
    Property,
    RecordStatus,
    VerificationRecord,
    VerificationStatus,
    VerificationSubmission,
)
from edqorta.services.notifications.center import NotificationCenter
from edqorta.services.verification.geofence import haversine_distance, within_geofence
from edqorta.storage.base import StorageBackend

logger = structlog.get_logger()


class VerificationWorkflow:
    """Moves a property from unverified through pending to verified.

    A submission is accepted only when the verifier stands within the
    geofence radius of the listed coordinates and attaches photos.
    There is no rejection path: a pending property can only be finalized.
    """

    def __init__(
        self,
        storage: StorageBackend,
        notifications: NotificationCenter,
        radius_meters: float | None = None,
    ) -> None:
        self.storage = storage
        self.notifications = notifications
        self.radius_meters = radius_meters or settings.geofence_radius_meters

    async def submit_verification(
        self,
        property_id: str,
        verifier_id: str,
        submission: VerificationSubmission,
    ) -> Property:
        """Submit on-site evidence for an unverified property.

        Args:
            property_id: Property being verified
            verifier_id: Agent standing at the property
            submission: Photos, geolocation sample and notes

        Returns:
            The property, now pending review

        Raises:
            NotFound: If the property or verifier does not exist
            AlreadyPending: If a submission is already awaiting review
            InvalidState: If the property is already verified
            ValidationError: If the listing has no coordinates
            OutOfRange: If the verifier is outside the geofence
            MissingEvidence: If no photos are attached
        """
        async with self.storage.lock:
            prop = await self.storage.require_property(property_id)
            verifier = await self.storage.require_user(verifier_id)

            if prop.verification_status == VerificationStatus.PENDING:
                raise AlreadyPending(prop.id)
            if prop.verification_status != VerificationStatus.UNVERIFIED:
                raise InvalidState(
                    "property",
                    prop.id,
                    prop.verification_status.value,
                    "submit verification for",
                )
            if not prop.has_coordinates:
                raise ValidationError(
                    "Property has no coordinates to verify against",
                    details={"property_id": prop.id},
                )

            reading = submission.geolocation
            distance = haversine_distance(
                reading.latitude,
                reading.longitude,
                prop.latitude,
                prop.longitude,
            )
            if not within_geofence(distance, self.radius_meters):
                logger.warning(
                    "Verification outside geofence",
                    property_id=prop.id,
                    verifier_id=verifier.id,
                    distance_meters=round(distance, 3),
                    accuracy=reading.accuracy,
                )
                raise OutOfRange(distance, self.radius_meters)

            photos = [p for p in submission.photos if p]
            if not photos:
                raise MissingEvidence(prop.id)

            prop.verification_status = VerificationStatus.PENDING
            prop.verification_data = VerificationRecord(
                verifier_id=verifier.id,
                photos=photos,
                geolocation=reading,
                notes=submission.notes,
                distance_meters=distance,
                submitted_at=self.storage.now(),
                status=RecordStatus.PENDING,
            )
            await self.storage.save_property(prop)

            await self.notifications.emit(
                f"Verification submitted for your property: {prop.location}",
                NotificationType.VERIFICATION,
                context_id=prop.id,
                recipient_id=prop.lister_id,
            )

            logger.info(
                "Verification submitted",
                property_id=prop.id,
                verifier_id=verifier.id,
                distance_meters=round(distance, 3),
                photos=len(photos),
            )
            return prop

    async def finalize_verification(self, property_id: str) -> Property:
        """Accept pending evidence and assign the submitting verifier."""
        async with self.storage.lock:
            prop = await self.storage.require_property(property_id)
            record = prop.verification_data
            if prop.verification_status != VerificationStatus.PENDING or record is None:
                raise InvalidState(
                    "property",
                    prop.id,
                    prop.verification_status.value,
                    "finalize verification for",
                )

            now = self.storage.now()
            prop.verification_status = VerificationStatus.VERIFIED
            prop.verifier_id = record.verifier_id
            prop.verification_completed_at = now
            record.status = RecordStatus.APPROVED
            await self.storage.save_property(prop)

            await self.notifications.emit(
                f"Your property at {prop.location} is now verified",
                NotificationType.VERIFICATION,
                context_id=prop.id,
                recipient_id=prop.lister_id,
            )

            logger.info(
                "Verification finalized",
                property_id=prop.id,
                verifier_id=prop.verifier_id,
            )
            return prop

    async def assigned_to(self, verifier_id: str) -> list[Property]:
        """Properties with evidence from this verifier still awaiting review."""
        return [
            p
            for p in await self.storage.list_properties()
            if p.verification_status == VerificationStatus.PENDING
            and p.verification_data is not None
            and p.verification_data.verifier_id == verifier_id
        ]

    async def completed_by(self, verifier_id: str) -> list[Property]:
        """Verified properties this user vouched for."""
        return [
            p
            for p in await self.storage.list_properties()
            if p.verification_status == VerificationStatus.VERIFIED
            and p.verifier_id == verifier_id
        ]

    async def earnings(self, verifier_id: str) -> float:
        """Sum of verification fees over completed verifications."""
        return sum(p.verification_fee or 0.0 for p in await self.completed_by(verifier_id))
