"""Outbound push delivery helpers."""

from .endpoint_client import HttpPushEndpointClient
from .fcm import FCM_SEND_URL, FcmPushProvider, build_fcm_message, get_push_provider

__all__ = [
    "FCM_SEND_URL",
    "FcmPushProvider",
    "HttpPushEndpointClient",
    "build_fcm_message",
    "get_push_provider",
]
