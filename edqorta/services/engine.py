"""Workflow engine - wires every component around one store."""

from dataclasses import dataclass

import structlog

from edqorta.core.exceptions import ConfigurationError
from edqorta.services.conversation.deals import DealLifecycle
from edqorta.services.conversation.manager import ConversationManager
from edqorta.services.engagement.service import EngagementService
from edqorta.services.notifications.center import NotificationCenter
from edqorta.services.notifications.sinks import NotificationSink
from edqorta.services.tours.workflow import TourWorkflow
from edqorta.services.verification.workflow import VerificationWorkflow
from edqorta.storage.base import StorageBackend

logger = structlog.get_logger()


@dataclass
class WorkflowEngine:
    """Every workflow component, sharing a single store.

    Constructed once at process start and passed to callers explicitly;
    there is no module-level instance.
    """

    storage: StorageBackend
    notifications: NotificationCenter
    conversations: ConversationManager
    deals: DealLifecycle
    tours: TourWorkflow
    verification: VerificationWorkflow
    engagement: EngagementService

    @classmethod
    def build(
        cls,
        storage: StorageBackend,
        sinks: list[NotificationSink] | None = None,
        reject_past_tours: bool | None = None,
        geofence_radius_meters: float | None = None,
    ) -> "WorkflowEngine":
        """Create the engine with its components.

        Args:
            storage: Store owning every collection
            sinks: Notification sinks (defaults to the logging sink)
            reject_past_tours: Override the setting of the same name
            geofence_radius_meters: Override the verification radius

        Returns:
            WorkflowEngine instance

        Raises:
            ConfigurationError: If the geofence radius is not positive
        """
        if geofence_radius_meters is not None and geofence_radius_meters <= 0:
            raise ConfigurationError(
                "Geofence radius must be positive",
                details={"geofence_radius_meters": geofence_radius_meters},
            )

        notifications = NotificationCenter(storage, sinks=sinks)
        conversations = ConversationManager(storage)

        engine = cls(
            storage=storage,
            notifications=notifications,
            conversations=conversations,
            deals=DealLifecycle(storage, notifications),
            tours=TourWorkflow(
                storage,
                conversations,
                notifications,
                reject_past_tours=reject_past_tours,
            ),
            verification=VerificationWorkflow(
                storage,
                notifications,
                radius_meters=geofence_radius_meters,
            ),
            engagement=EngagementService(storage, notifications),
        )

        logger.debug(
            "Workflow engine built",
            storage=type(storage).__name__,
            sinks=[s.sink_name for s in notifications.sinks],
        )
        return engine
