"""Domain entities exposed by the application."""

from .device_token import DeviceToken
from .notification import (
    InvalidNotificationError,
    NotificationNotFoundError,
    NotificationRecord,
    NotificationSnapshot,
    NotificationType,
    build_notification,
)
from .push import (
    PUSH_ERROR_INTERNAL,
    PUSH_ERROR_INVALID_ARGUMENT,
    PushEndpointError,
    PushNotificationContent,
    PushProviderError,
    PushRequest,
    PushSendResult,
)
from .session import SessionContext

__all__ = [
    "DeviceToken",
    "InvalidNotificationError",
    "NotificationNotFoundError",
    "NotificationRecord",
    "NotificationSnapshot",
    "NotificationType",
    "build_notification",
    "PUSH_ERROR_INTERNAL",
    "PUSH_ERROR_INVALID_ARGUMENT",
    "PushEndpointError",
    "PushNotificationContent",
    "PushProviderError",
    "PushRequest",
    "PushSendResult",
    "SessionContext",
]
