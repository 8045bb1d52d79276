"""Notification center - records workflow events and their read state."""

import structlog

from edqorta.models import Notification, NotificationType
from edqorta.services.notifications.sinks import LoggingSink, NotificationSink
from edqorta.storage.base import StorageBackend

logger = structlog.get_logger()


class NotificationCenter:
    """Records notifications emitted by the workflows.

    Workflows call :meth:`emit` while they already hold the store lock;
    external callers use :meth:`record`, which takes the lock itself.
    """

    def __init__(
        self,
        storage: StorageBackend,
        sinks: list[NotificationSink] | None = None,
    ) -> None:
        self.storage = storage
        self.sinks = sinks if sinks is not None else [LoggingSink()]

    async def record(
        self,
        message: str,
        type: NotificationType,
        context_id: str | None = None,
        recipient_id: str | None = None,
    ) -> Notification:
        """Record a notification, newest first and unread.

        Args:
            message: Human-readable text
            type: Kind of event
            context_id: Entity that triggered the event
            recipient_id: User the event is addressed to

        Returns:
            The stored Notification
        """
        async with self.storage.lock:
            return await self.emit(message, type, context_id, recipient_id)

    async def emit(
        self,
        message: str,
        type: NotificationType,
        context_id: str | None = None,
        recipient_id: str | None = None,
    ) -> Notification:
        """Record a notification; the caller must hold the store lock."""
        notification = Notification(
            id=self.storage.new_id(),
            message=message,
            type=type,
            timestamp=self.storage.now(),
            read=False,
            context_id=context_id,
            recipient_id=recipient_id,
        )
        await self.storage.save_notification(notification)

        for sink in self.sinks:
            try:
                await sink.deliver(notification)
            except Exception as e:
                # Delivery is best effort; the notification is already recorded
                logger.error(
                    "Notification sink failed",
                    sink=sink.sink_name,
                    notification_id=notification.id,
                    error=str(e),
                    exc_info=True,
                )

        return notification

    async def mark_read(self, notification_id: str) -> None:
        """Flip a notification to read. Unknown or already-read ids are a no-op."""
        async with self.storage.lock:
            notification = await self.storage.get_notification(notification_id)
            if notification is None or notification.read:
                return
            notification.read = True
            await self.storage.save_notification(notification)

    async def list_notifications(
        self,
        recipient_id: str | None = None,
        unread_only: bool = False,
    ) -> list[Notification]:
        notifications = await self.storage.list_notifications(recipient_id)
        if unread_only:
            notifications = [n for n in notifications if not n.read]
        return notifications

    async def unread_count(self, recipient_id: str | None = None) -> int:
        return len(await self.list_notifications(recipient_id, unread_only=True))
