"""JSON payloads describing notifications for realtime listeners."""

from __future__ import annotations

from typing import Any

from waffl.domain.entities import NotificationRecord, NotificationSnapshot


def serialize_notification(record: NotificationRecord) -> dict[str, Any]:
    """Return the websocket payload representation for ``record``."""

    return {
        "id": record.id,
        "recipient_id": record.recipient_id,
        "sender_id": record.sender_id,
        "sender_name": record.sender_name,
        "sender_profile_image_url": record.sender_profile_image_url,
        "type": record.type.value,
        "video_id": record.video_id,
        "video_thumbnail_url": record.video_thumbnail_url,
        "comment_text": record.comment_text,
        "created_at": record.created_at.isoformat() if record.created_at else None,
        "is_read": record.is_read,
    }


def serialize_snapshot(snapshot: NotificationSnapshot) -> dict[str, Any]:
    """Return a full window with its derived unread count."""

    unread_count = snapshot.unread_count
    return {
        "notifications": [serialize_notification(record) for record in snapshot.records],
        "unread_count": unread_count,
        "has_unread": unread_count > 0,
    }


__all__ = ["serialize_notification", "serialize_snapshot"]
