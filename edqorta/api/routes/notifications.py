"""Notification endpoints."""

from typing import Any

from fastapi import APIRouter, status

from edqorta.api.dependencies import NotificationsDep
from edqorta.models import Notification

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("")
async def list_notifications(
    notifications: NotificationsDep,
    recipient_id: str | None = None,
    unread_only: bool = False,
) -> dict[str, Any]:
    """List notifications, most recent first."""
    items: list[Notification] = await notifications.list_notifications(
        recipient_id=recipient_id,
        unread_only=unread_only,
    )
    return {
        "count": len(items),
        "unread": sum(1 for n in items if not n.read),
        "notifications": [n.model_dump(mode="json") for n in items],
    }


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_notification_read(notification_id: str, notifications: NotificationsDep) -> None:
    """Mark a notification as read. Unknown ids are ignored."""
    await notifications.mark_read(notification_id)
