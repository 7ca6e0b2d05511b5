"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from waffl.domain.entities import NotificationType


class NotificationMarkReadRequest(BaseModel):
    """Payload used to mark a batch of notifications as read."""

    ids: list[str] = Field(..., min_length=1, description="Notification identifiers")

    def unique_ids(self) -> list[str]:
        """Return the list of identifiers without duplicates preserving order."""

        return list(dict.fromkeys(self.ids))


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: str
    recipient_id: str
    sender_id: str
    sender_name: str
    sender_profile_image_url: str | None = None
    type: NotificationType
    video_id: str | None = None
    video_thumbnail_url: str | None = None
    comment_text: str | None = None
    created_at: datetime
    is_read: bool
    time_ago: str


class UnreadCountRead(BaseModel):
    unread_count: int
    has_unread: bool


class NotificationListRead(UnreadCountRead):
    """Newest window of notifications with its derived unread count."""

    notifications: list[NotificationRead] = Field(default_factory=list)


class MarkReadResult(BaseModel):
    updated: int


__all__ = [
    "MarkReadResult",
    "NotificationListRead",
    "NotificationMarkReadRequest",
    "NotificationRead",
    "UnreadCountRead",
]
