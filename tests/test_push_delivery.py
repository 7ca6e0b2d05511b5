"""Tests for the push send use case and the HTTP delivery clients."""

from __future__ import annotations

import json

import httpx
import pytest

from waffl.application.use_cases.push import LocalPushEndpointClient, send_push_notification
from waffl.application.use_cases.push.send_push import coerce_data_value
from waffl.domain.entities import (
    PUSH_ERROR_INTERNAL,
    PUSH_ERROR_INVALID_ARGUMENT,
    PushEndpointError,
    PushNotificationContent,
    PushProviderError,
    PushRequest,
)
from waffl.infrastructure.push import FcmPushProvider, HttpPushEndpointClient, get_push_provider


class RecordingProvider:
    def __init__(self, error: Exception | None = None) -> None:
        self.messages = []
        self.error = error

    def send(self, message):
        self.messages.append(message)
        if self.error is not None:
            raise self.error
        return "projects/demo/messages/1"


def _payload(**overrides):
    payload = {
        "to": "device-token",
        "notification": {"title": "New Like", "body": "Bob liked your video"},
        "dataPayload": {"type": "like", "videoId": "v-1"},
        "priority": "high",
    }
    payload.update(overrides)
    return payload


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"notification": {"title": "t", "body": "b"}}, "Missing required fields: to, notification"),
        ({"to": "device-token"}, "Missing required fields: to, notification"),
        ({"to": "device-token", "notification": {"title": "t"}}, "Notification must have title and body"),
        ({"to": "device-token", "notification": {"body": "b"}}, "Notification must have title and body"),
    ],
)
def test_malformed_requests_are_invalid_arguments(payload, message):
    provider = RecordingProvider()

    with pytest.raises(PushEndpointError) as excinfo:
        send_push_notification(payload, provider=provider)

    assert excinfo.value.code == PUSH_ERROR_INVALID_ARGUMENT
    assert excinfo.value.message == message
    assert provider.messages == []


def test_valid_request_is_delivered_with_string_data():
    provider = RecordingProvider()

    result = send_push_notification(
        _payload(dataPayload={"videoId": "v-1", "count": 3, "flag": True, "meta": {"a": 1}}),
        provider=provider,
    )

    assert result.success is True
    assert result.message_id == "projects/demo/messages/1"
    message = provider.messages[0]
    assert message["token"] == "device-token"
    assert message["notification"] == {"title": "New Like", "body": "Bob liked your video"}
    assert message["data"] == {"videoId": "v-1", "count": "3", "flag": "true", "meta": '{"a":1}'}
    assert message["apns"]["payload"]["aps"]["alert"]["title"] == "New Like"
    assert message["apns"]["payload"]["aps"]["badge"] == 1


def test_provider_failure_is_reported_as_internal():
    provider = RecordingProvider(error=PushProviderError("FCM responded with status 404"))

    with pytest.raises(PushEndpointError) as excinfo:
        send_push_notification(_payload(), provider=provider)

    assert excinfo.value.code == PUSH_ERROR_INTERNAL
    assert excinfo.value.message == "Failed to send push notification"
    assert len(provider.messages) == 1


def test_unconfigured_provider_is_internal():
    with pytest.raises(PushEndpointError) as excinfo:
        send_push_notification(_payload(), provider=None)

    assert excinfo.value.code == PUSH_ERROR_INTERNAL


@pytest.mark.parametrize(
    ("value", "expected"),
    [("x", "x"), (False, "false"), (None, "null"), (2.5, "2.5"), ([1, "a"], '[1,"a"]')],
)
def test_coerce_data_value(value, expected):
    assert coerce_data_value(value) == expected


def test_local_client_uses_the_provider_factory():
    provider = RecordingProvider()
    client = LocalPushEndpointClient(lambda: provider)

    result = client.send(
        PushRequest(
            to="device-token",
            notification=PushNotificationContent(title="New Follower", body="Bob started following you"),
            data_payload={"type": "follow"},
        )
    )

    assert result.message_id == "projects/demo/messages/1"
    assert provider.messages[0]["data"] == {"type": "follow"}


def test_fcm_provider_posts_message_with_bearer_token():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"name": "projects/demo/messages/42"})

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        provider = FcmPushProvider("demo", "access-token", client=client)
        message_id = provider.send({"token": "device-token"})

    assert message_id == "projects/demo/messages/42"
    assert str(seen[0].url) == "https://fcm.googleapis.com/v1/projects/demo/messages:send"
    assert seen[0].headers["Authorization"] == "Bearer access-token"
    assert json.loads(seen[0].content) == {"message": {"token": "device-token"}}


def test_fcm_provider_raises_on_error_status():
    transport = httpx.MockTransport(lambda request: httpx.Response(404, json={"error": "gone"}))

    with httpx.Client(transport=transport) as client:
        provider = FcmPushProvider("demo", "access-token", client=client)
        with pytest.raises(PushProviderError):
            provider.send({"token": "stale"})


def test_http_endpoint_client_decodes_success_and_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if body["to"] == "bad":
            return httpx.Response(
                400,
                json={"detail": {"code": "invalid-argument", "message": "Notification must have title and body"}},
            )
        assert request.headers["X-API-Key"] == "secret"
        return httpx.Response(200, json={"success": True, "messageId": "m-1"})

    request = PushRequest(to="device-token", notification=PushNotificationContent(title="t", body="b"))
    with httpx.Client(transport=httpx.MockTransport(handler)) as http:
        client = HttpPushEndpointClient("https://push.test/send", api_key="secret", client=http)

        result = client.send(request)
        assert (result.success, result.message_id) == (True, "m-1")

        with pytest.raises(PushEndpointError) as excinfo:
            client.send(PushRequest(to="bad", notification=PushNotificationContent(title="t", body="b")))

    assert excinfo.value.code == PUSH_ERROR_INVALID_ARGUMENT


def test_http_endpoint_client_maps_transport_errors_to_internal():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    request = PushRequest(to="device-token", notification=PushNotificationContent(title="t", body="b"))
    with httpx.Client(transport=httpx.MockTransport(handler)) as http:
        client = HttpPushEndpointClient("https://push.test/send", client=http)
        with pytest.raises(PushEndpointError) as excinfo:
            client.send(request)

    assert excinfo.value.code == PUSH_ERROR_INTERNAL


def test_push_provider_requires_both_fcm_settings(monkeypatch):
    assert get_push_provider() is None

    monkeypatch.setenv("FCM_PROJECT_ID", "demo")
    monkeypatch.setenv("FCM_ACCESS_TOKEN", "access-token")
    from waffl.config import reset_settings_cache

    reset_settings_cache()
    assert isinstance(get_push_provider(), FcmPushProvider)
