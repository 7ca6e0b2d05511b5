"""Repository implementations for infrastructure layer."""

from .device_token_repository import DeviceTokenRepository
from .notification_repository import NotificationRepository

__all__ = ["DeviceTokenRepository", "NotificationRepository"]
