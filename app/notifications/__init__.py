"""
Notification sinks.
"""

from app.notifications.webhook import (
    NoOpNotificationSink,
    NotificationDeliveryError,
    NotificationSink,
    WebhookNotificationSink,
)

__all__ = [
    "NoOpNotificationSink",
    "NotificationDeliveryError",
    "NotificationSink",
    "WebhookNotificationSink",
]
