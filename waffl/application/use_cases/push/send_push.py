"""Validate push requests and forward them to the delivery provider."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Callable, Protocol

from waffl.domain.entities import (
    PUSH_ERROR_INTERNAL,
    PUSH_ERROR_INVALID_ARGUMENT,
    PushEndpointError,
    PushRequest,
    PushSendResult,
)
from waffl.infrastructure.push import build_fcm_message, get_push_provider

logger = logging.getLogger(__name__)


class PushProvider(Protocol):
    def send(self, message: dict[str, Any]) -> str:
        ...


def coerce_data_value(value: Any) -> str:
    """Render ``value`` as the string form delivered in the data payload."""

    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def coerce_data_payload(data: Mapping[str, Any] | None) -> dict[str, str]:
    """Return ``data`` with every value converted to a string."""

    if not data:
        return {}
    return {str(key): coerce_data_value(value) for key, value in data.items()}


def send_push_notification(
    payload: Mapping[str, Any],
    *,
    provider: PushProvider | None,
) -> PushSendResult:
    """Validate ``payload`` and deliver it through ``provider``.

    Raises :class:`PushEndpointError` with code ``invalid-argument`` when the
    request is malformed and ``internal`` when delivery fails. Nothing is
    retried.
    """

    to = payload.get("to")
    notification = payload.get("notification")
    if not to or not notification:
        logger.error(
            "Push request missing required fields (to=%s, notification=%s)",
            bool(to),
            bool(notification),
        )
        raise PushEndpointError(
            PUSH_ERROR_INVALID_ARGUMENT, "Missing required fields: to, notification"
        )
    if not isinstance(notification, Mapping) or not (
        notification.get("title") and notification.get("body")
    ):
        logger.error("Push request has an invalid notification structure")
        raise PushEndpointError(
            PUSH_ERROR_INVALID_ARGUMENT, "Notification must have title and body"
        )

    token = str(to)
    title = str(notification["title"])
    body = str(notification["body"])
    data_payload = payload.get("dataPayload")
    if data_payload is not None and not isinstance(data_payload, Mapping):
        raise PushEndpointError(PUSH_ERROR_INVALID_ARGUMENT, "dataPayload must be an object")

    message = build_fcm_message(
        token=token,
        title=title,
        body=body,
        data=coerce_data_payload(data_payload),
        badge=_as_int(notification.get("badge"), default=1),
        sound=str(notification.get("sound") or "default"),
    )
    logger.info("Sending push notification %r to token %s...", title, token[:20])

    if provider is None:
        logger.error("Push delivery is not configured; dropping message %r", title)
        raise PushEndpointError(
            PUSH_ERROR_INTERNAL,
            "Failed to send push notification",
            "Push delivery is not configured",
        )

    try:
        message_id = provider.send(message)
    except Exception as exc:
        logger.exception("Error sending push notification to token %s...", token[:20])
        raise PushEndpointError(
            PUSH_ERROR_INTERNAL, "Failed to send push notification", str(exc)
        ) from exc

    logger.info("Push notification sent with id %s", message_id)
    return PushSendResult(success=True, message_id=message_id)


def _as_int(value: Any, *, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


class LocalPushEndpointClient:
    """Call the send use case in-process instead of over HTTP."""

    def __init__(
        self, provider_factory: Callable[[], PushProvider | None] = get_push_provider
    ) -> None:
        self._provider_factory = provider_factory

    def send(self, request: PushRequest) -> PushSendResult:
        return send_push_notification(request.to_payload(), provider=self._provider_factory())


__all__ = [
    "LocalPushEndpointClient",
    "PushProvider",
    "coerce_data_payload",
    "coerce_data_value",
    "send_push_notification",
]
