"""Notifier - Delivers the aggregated notification of a polling cycle."""

from deskwatch.notifier.exceptions import DeliveryError, NotifierError
from deskwatch.notifier.notifiers import (
    DeliveredNotification,
    LogNotifier,
    NotificationSink,
    RecordingNotifier,
    WebhookNotifier,
)

__all__ = [
    "DeliveredNotification",
    "DeliveryError",
    "LogNotifier",
    "NotificationSink",
    "NotifierError",
    "RecordingNotifier",
    "WebhookNotifier",
]
