"""Notification service - in-memory center and delivery sinks."""

from edqorta.services.notifications.center import NotificationCenter
from edqorta.services.notifications.sinks import CollectingSink, LoggingSink, NotificationSink

__all__ = ["NotificationCenter", "NotificationSink", "LoggingSink", "CollectingSink"]
