"""Realtime notification helpers for the infrastructure layer."""

from .feed import FeedListener, NotificationChangeFeed, notification_feed
from .serializers import serialize_notification, serialize_snapshot
from .store import DEFAULT_WINDOW_SIZE, NotificationStore, NotificationSubscription

__all__ = [
    "DEFAULT_WINDOW_SIZE",
    "FeedListener",
    "NotificationChangeFeed",
    "notification_feed",
    "NotificationStore",
    "NotificationSubscription",
    "serialize_notification",
    "serialize_snapshot",
]
