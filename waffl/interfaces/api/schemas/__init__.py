from .interaction import (
    CommentInteraction,
    FollowInteraction,
    InteractionNotificationRead,
    LikeInteraction,
)
from .notification import (
    MarkReadResult,
    NotificationListRead,
    NotificationMarkReadRequest,
    NotificationRead,
    UnreadCountRead,
)
from .push import DeviceTokenRead, DeviceTokenUpdate, PushSendResponse

__all__ = [
    "CommentInteraction",
    "DeviceTokenRead",
    "DeviceTokenUpdate",
    "FollowInteraction",
    "InteractionNotificationRead",
    "LikeInteraction",
    "MarkReadResult",
    "NotificationListRead",
    "NotificationMarkReadRequest",
    "NotificationRead",
    "PushSendResponse",
    "UnreadCountRead",
]
