"""Resolve a recipient's device token and request delivery of a push."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Callable, Protocol

from sqlalchemy.orm import Session, sessionmaker

from waffl.config import get_settings
from waffl.domain.entities import (
    PushEndpointError,
    PushNotificationContent,
    PushRequest,
    PushSendResult,
)
from waffl.infrastructure.push import HttpPushEndpointClient
from waffl.infrastructure.repositories import DeviceTokenRepository

from .send_push import LocalPushEndpointClient

logger = logging.getLogger(__name__)

PushScheduler = Callable[..., Any]


class PushEndpointClient(Protocol):
    def send(self, request: PushRequest) -> PushSendResult:
        ...


class PushDispatcher:
    """Make at most one delivery attempt per call; failures are only logged."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        endpoint: PushEndpointClient,
    ) -> None:
        self._session_factory = session_factory
        self._endpoint = endpoint

    def dispatch(
        self,
        recipient_id: str,
        *,
        title: str,
        body: str,
        data: dict[str, Any] | None = None,
    ) -> PushSendResult | None:
        """Send a push to ``recipient_id`` if they registered a device token."""

        try:
            with self._session_factory() as session:
                device_token = DeviceTokenRepository(session).get(recipient_id)
        except Exception:
            logger.exception("Error getting device token for user %s", recipient_id)
            return None

        if device_token is None or not device_token.token:
            logger.info("No device token found for user %s; skipping push", recipient_id)
            return None

        request = PushRequest(
            to=device_token.token,
            notification=PushNotificationContent(title=title, body=body),
            data_payload=dict(data or {}),
        )
        try:
            result = self._endpoint.send(request)
        except PushEndpointError as exc:
            logger.warning(
                "Push endpoint rejected notification for %s (%s): %s",
                recipient_id,
                exc.code,
                exc.message,
            )
            return None
        except Exception:
            logger.exception("Error sending push notification to %s", recipient_id)
            return None

        logger.info(
            "Push notification sent to %s (token %s...): %s",
            recipient_id,
            device_token.token_prefix,
            result.message_id,
        )
        return result

    def schedule(
        self,
        recipient_id: str,
        *,
        title: str,
        body: str,
        data: dict[str, Any] | None = None,
        scheduler: PushScheduler | None = None,
    ) -> None:
        """Hand :meth:`dispatch` to ``scheduler`` or run it right away.

        ``scheduler`` follows ``BackgroundTasks.add_task``: request handlers
        pass it so the push is sent after the response is returned.
        """

        if scheduler is None:
            self.dispatch(recipient_id, title=title, body=body, data=data)
            return
        scheduler(self.dispatch, recipient_id, title=title, body=body, data=data)


def build_push_endpoint_client() -> PushEndpointClient:
    """Return an HTTP client when a remote endpoint is configured."""

    settings = get_settings()
    if settings.push_endpoint_url:
        return HttpPushEndpointClient(
            settings.push_endpoint_url,
            api_key=settings.push_endpoint_api_key,
            timeout=settings.push_request_timeout_seconds,
        )
    return LocalPushEndpointClient()


@lru_cache(maxsize=1)
def get_push_dispatcher() -> PushDispatcher:
    """Return the shared dispatcher bound to the application database."""

    from waffl.infrastructure.database import SessionLocal

    return PushDispatcher(SessionLocal, build_push_endpoint_client())


__all__ = [
    "PushDispatcher",
    "PushEndpointClient",
    "PushScheduler",
    "build_push_endpoint_client",
    "get_push_dispatcher",
]
