"""Application layer: use cases and the live notification view."""

from .notification_center import NotificationCenter, NotificationViewState

__all__ = ["NotificationCenter", "NotificationViewState"]
