"""ORM models used by the application infrastructure."""

from .device_token import DeviceTokenModel
from .notification import NotificationModel

__all__ = ["DeviceTokenModel", "NotificationModel"]
