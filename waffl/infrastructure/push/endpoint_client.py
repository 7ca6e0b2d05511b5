"""HTTP client for a remotely deployed push send endpoint."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from waffl.domain.entities import (
    PUSH_ERROR_INTERNAL,
    PushEndpointError,
    PushRequest,
    PushSendResult,
)

logger = logging.getLogger(__name__)


class HttpPushEndpointClient:
    """POST push requests to ``url`` and decode the endpoint answer."""

    def __init__(
        self,
        url: str,
        *,
        api_key: str | None = None,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._url = url
        self._api_key = api_key
        self._timeout = timeout
        self._client = client

    def send(self, request: PushRequest) -> PushSendResult:
        headers = {"X-API-Key": self._api_key} if self._api_key else {}
        try:
            if self._client is not None:
                response = self._client.post(
                    self._url, json=request.to_payload(), headers=headers, timeout=self._timeout
                )
            else:
                with httpx.Client() as client:
                    response = client.post(
                        self._url,
                        json=request.to_payload(),
                        headers=headers,
                        timeout=self._timeout,
                    )
        except httpx.HTTPError as exc:
            raise PushEndpointError(
                PUSH_ERROR_INTERNAL, "Push endpoint unreachable", str(exc)
            ) from exc

        body = _safe_json(response)
        if response.is_success:
            return PushSendResult(
                success=bool(body.get("success", True)),
                message_id=str(body.get("messageId", "")),
            )

        detail = body.get("detail")
        if isinstance(detail, dict):
            code = str(detail.get("code") or PUSH_ERROR_INTERNAL)
            message = str(detail.get("message") or "Push endpoint rejected the request")
        else:
            code = PUSH_ERROR_INTERNAL
            message = f"Push endpoint responded with status {response.status_code}"
        raise PushEndpointError(code, message)


def _safe_json(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


__all__ = ["HttpPushEndpointClient"]
