"""Public helpers for emitting and managing interaction notifications."""

from .events import build_push_content, notify_comment, notify_follow, notify_like
from .read_state import (
    delete_notification,
    list_recent_notifications,
    mark_notification_as_read,
    mark_notifications_as_read,
    mark_window_as_read,
)

__all__ = [
    "build_push_content",
    "notify_like",
    "notify_comment",
    "notify_follow",
    "list_recent_notifications",
    "mark_notification_as_read",
    "mark_notifications_as_read",
    "mark_window_as_read",
    "delete_notification",
]
