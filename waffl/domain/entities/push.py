"""Domain objects exchanged with the push send endpoint."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

PUSH_ERROR_INVALID_ARGUMENT = "invalid-argument"
PUSH_ERROR_INTERNAL = "internal"


class PushEndpointError(Exception):
    """Error answered by the push send endpoint with a machine readable code."""

    def __init__(self, code: str, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details


class PushProviderError(Exception):
    """Raised when the delivery provider rejects or fails a message."""


@dataclass
class PushNotificationContent:
    """Visible part of a push notification."""

    title: str
    body: str
    sound: str = "default"
    badge: int = 1


@dataclass
class PushRequest:
    """Request sent to the push endpoint for a single device."""

    to: str
    notification: PushNotificationContent
    data_payload: dict[str, Any] = field(default_factory=dict)
    priority: str = "high"

    def to_payload(self) -> dict[str, Any]:
        """Return the wire representation accepted by the push endpoint."""

        return {
            "to": self.to,
            "notification": {
                "title": self.notification.title,
                "body": self.notification.body,
                "sound": self.notification.sound,
                "badge": self.notification.badge,
            },
            "dataPayload": dict(self.data_payload),
            "priority": self.priority,
        }


@dataclass
class PushSendResult:
    """Successful answer of the push endpoint."""

    success: bool
    message_id: str


__all__ = [
    "PUSH_ERROR_INTERNAL",
    "PUSH_ERROR_INVALID_ARGUMENT",
    "PushEndpointError",
    "PushNotificationContent",
    "PushProviderError",
    "PushRequest",
    "PushSendResult",
]
