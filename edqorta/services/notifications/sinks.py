"""Delivery sinks for recorded notifications."""

from abc import ABC, abstractmethod

import structlog

from edqorta.models import Notification

logger = structlog.get_logger()


class NotificationSink(ABC):
    """Abstract destination for notifications.

    The in-memory center is the source of truth; a sink forwards each
    recorded notification somewhere else (push, email, a log stream).
    """

    @property
    @abstractmethod
    def sink_name(self) -> str:
        """Get the sink name identifier."""
        ...

    @abstractmethod
    async def deliver(self, notification: Notification) -> None:
        """Forward a notification that has already been recorded.

        Args:
            notification: The stored notification
        """
        ...


class LoggingSink(NotificationSink):
    """Writes every notification to the structured log."""

    @property
    def sink_name(self) -> str:
        return "log"

    async def deliver(self, notification: Notification) -> None:
        logger.info(
            "Notification delivered",
            notification_id=notification.id,
            type=notification.type.value,
            recipient_id=notification.recipient_id,
            context_id=notification.context_id,
        )


class CollectingSink(NotificationSink):
    """Keeps delivered notifications in a list, for tests and local tooling."""

    def __init__(self) -> None:
        self.delivered: list[Notification] = []

    @property
    def sink_name(self) -> str:
        return "collect"

    async def deliver(self, notification: Notification) -> None:
        self.delivered.append(notification)
