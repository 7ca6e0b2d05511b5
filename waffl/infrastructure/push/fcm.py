"""Firebase Cloud Messaging (HTTP v1) delivery provider."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from waffl.config import get_settings
from waffl.domain.entities import PushProviderError

logger = logging.getLogger(__name__)

FCM_SEND_URL = "https://fcm.googleapis.com/v1/projects/{project_id}/messages:send"


class FcmPushProvider:
    """Send a single message to one device token through FCM."""

    def __init__(
        self,
        project_id: str,
        access_token: str,
        *,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._url = FCM_SEND_URL.format(project_id=project_id)
        self._access_token = access_token
        self._timeout = timeout
        self._client = client

    def send(self, message: dict[str, Any]) -> str:
        """Deliver ``message`` and return the provider message identifier."""

        headers = {"Authorization": f"Bearer {self._access_token}"}
        try:
            if self._client is not None:
                response = self._client.post(
                    self._url, json={"message": message}, headers=headers, timeout=self._timeout
                )
            else:
                with httpx.Client() as client:
                    response = client.post(
                        self._url,
                        json={"message": message},
                        headers=headers,
                        timeout=self._timeout,
                    )
        except httpx.HTTPError as exc:
            raise PushProviderError(f"FCM request failed: {exc}") from exc

        if response.status_code != 200:
            logger.error(
                "FCM responded with status %s: %s", response.status_code, response.text
            )
            raise PushProviderError(f"FCM responded with status {response.status_code}")

        try:
            message_id = response.json().get("name")
        except ValueError as exc:
            raise PushProviderError("FCM returned an unreadable response") from exc
        if not message_id:
            raise PushProviderError("FCM response did not include a message name")
        return str(message_id)


def build_fcm_message(
    *,
    token: str,
    title: str,
    body: str,
    data: dict[str, str],
    badge: int = 1,
    sound: str = "default",
) -> dict[str, Any]:
    """Return the FCM v1 message body with the APNs alert block iOS needs."""

    return {
        "token": token,
        "notification": {"title": title, "body": body},
        "data": data,
        "apns": {
            "payload": {
                "aps": {
                    "badge": badge,
                    "sound": sound,
                    "alert": {"title": title, "body": body},
                }
            }
        },
    }


def get_push_provider() -> FcmPushProvider | None:
    """Return the configured provider or ``None`` when FCM is not set up."""

    settings = get_settings()
    if not (settings.fcm_project_id and settings.fcm_access_token):
        return None
    return FcmPushProvider(
        settings.fcm_project_id,
        settings.fcm_access_token,
        timeout=settings.push_request_timeout_seconds,
    )


__all__ = ["FCM_SEND_URL", "FcmPushProvider", "build_fcm_message", "get_push_provider"]
