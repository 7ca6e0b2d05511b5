"""Push token registration, dispatch and send endpoint use cases."""

from .devices import register_device_token
from .dispatcher import (
    PushDispatcher,
    PushEndpointClient,
    PushScheduler,
    build_push_endpoint_client,
    get_push_dispatcher,
)
from .send_push import (
    LocalPushEndpointClient,
    coerce_data_payload,
    send_push_notification,
)

__all__ = [
    "LocalPushEndpointClient",
    "PushDispatcher",
    "PushEndpointClient",
    "PushScheduler",
    "build_push_endpoint_client",
    "coerce_data_payload",
    "get_push_dispatcher",
    "register_device_token",
    "send_push_notification",
]
