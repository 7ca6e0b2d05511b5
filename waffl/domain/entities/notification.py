"""Domain entity representing a like, comment or follow notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import uuid4

from waffl.utils import ensure_utc, utc_now


class InvalidNotificationError(ValueError):
    """Raised when a notification does not respect the shape of its type."""


class NotificationNotFoundError(ValueError):
    """Raised when a notification does not exist or belongs to another user."""

    def __init__(self, notification_id: str) -> None:
        super().__init__(f"Notification with id {notification_id} not found")
        self.notification_id = notification_id


class NotificationType(str, Enum):
    """Closed set of interactions that produce a notification."""

    LIKE = "like"
    COMMENT = "comment"
    FOLLOW = "follow"

    @property
    def action_text(self) -> str:
        """Phrase rendered after the sender name."""

        return _ACTION_TEXT[self]

    @property
    def push_title(self) -> str:
        """Title used for the push notification of this type."""

        return _PUSH_TITLES[self]

    @property
    def targets_video(self) -> bool:
        return self in (NotificationType.LIKE, NotificationType.COMMENT)

    @classmethod
    def parse(cls, value: str | None) -> "NotificationType":
        """Decode a stored type, falling back to ``like`` for unknown values."""

        try:
            return cls(value)
        except ValueError:
            return cls.LIKE


_ACTION_TEXT = {
    NotificationType.LIKE: "liked your video",
    NotificationType.COMMENT: "commented on your video",
    NotificationType.FOLLOW: "started following you",
}

_PUSH_TITLES = {
    NotificationType.LIKE: "New Like",
    NotificationType.COMMENT: "New Comment",
    NotificationType.FOLLOW: "New Follower",
}


@dataclass(frozen=True)
class NotificationRecord:
    """One interaction event directed at a recipient.

    ``sender_name`` and ``sender_profile_image_url`` are copies taken when the
    record is created; they are not refreshed when the sender edits their
    profile. ``is_read`` is the only attribute that changes after creation.
    """

    id: str
    recipient_id: str
    sender_id: str
    sender_name: str
    type: NotificationType
    created_at: datetime
    sender_profile_image_url: str | None = None
    video_id: str | None = None
    video_thumbnail_url: str | None = None
    comment_text: str | None = None
    is_read: bool = False

    def validate(self) -> None:
        """Raise :class:`InvalidNotificationError` when invariants do not hold."""

        if not self.id:
            raise InvalidNotificationError("Notification id is required")
        if not self.recipient_id or not self.sender_id:
            raise InvalidNotificationError("Recipient and sender are required")
        if self.recipient_id == self.sender_id:
            raise InvalidNotificationError("Users cannot notify themselves")
        if self.type.targets_video:
            if not self.video_id:
                raise InvalidNotificationError(
                    f"A {self.type.value} notification requires a video id"
                )
        elif self.video_id is not None or self.video_thumbnail_url is not None:
            raise InvalidNotificationError("A follow notification cannot reference a video")
        if self.type is NotificationType.COMMENT:
            if not self.comment_text:
                raise InvalidNotificationError("A comment notification requires the comment text")
        elif self.comment_text is not None:
            raise InvalidNotificationError(
                f"A {self.type.value} notification cannot carry comment text"
            )

    def time_ago(self, now: datetime | None = None) -> str:
        """Return a compact relative age such as ``5m ago``."""

        reference = ensure_utc(now) if now is not None else utc_now()
        created_at = ensure_utc(self.created_at)
        seconds = (reference - created_at).total_seconds()
        if seconds < 60:
            return "just now"
        if seconds < 3600:
            return f"{int(seconds // 60)}m ago"
        if seconds < 86400:
            return f"{int(seconds // 3600)}h ago"
        if seconds < 604800:
            return f"{int(seconds // 86400)}d ago"
        return f"{created_at.month}/{created_at.day}/{created_at.year % 100:02d}"

    def navigation_target(self) -> tuple[str, str]:
        """Return where tapping the notification leads: a video or a profile."""

        if self.type.targets_video and self.video_id:
            return ("video", self.video_id)
        return ("profile", self.sender_id)


def build_notification(
    notification_type: NotificationType,
    *,
    recipient_id: str,
    sender_id: str,
    sender_name: str,
    sender_profile_image_url: str | None = None,
    video_id: str | None = None,
    video_thumbnail_url: str | None = None,
    comment_text: str | None = None,
    created_at: datetime | None = None,
) -> NotificationRecord:
    """Create a new unread record with a fresh id and creation timestamp."""

    record = NotificationRecord(
        id=str(uuid4()),
        recipient_id=recipient_id,
        sender_id=sender_id,
        sender_name=sender_name,
        sender_profile_image_url=sender_profile_image_url,
        type=notification_type,
        video_id=video_id,
        video_thumbnail_url=video_thumbnail_url,
        comment_text=comment_text,
        created_at=ensure_utc(created_at) if created_at is not None else utc_now(),
        is_read=False,
    )
    record.validate()
    return record


@dataclass(frozen=True)
class NotificationSnapshot:
    """Full, ordered window of a recipient's notifications at one point in time."""

    recipient_id: str
    records: tuple[NotificationRecord, ...] = field(default_factory=tuple)

    @property
    def unread_count(self) -> int:
        return sum(1 for record in self.records if not record.is_read)


__all__ = [
    "InvalidNotificationError",
    "NotificationNotFoundError",
    "NotificationRecord",
    "NotificationSnapshot",
    "NotificationType",
    "build_notification",
]
