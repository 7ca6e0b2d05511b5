"""Durable read-state and deletion operations on a recipient's notifications."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy.orm import Session

from waffl.config import get_settings
from waffl.domain.entities import NotificationRecord, NotificationSnapshot
from waffl.infrastructure.notifications import NotificationChangeFeed, notification_feed
from waffl.infrastructure.repositories import NotificationRepository


def _window_size(limit: int | None) -> int:
    return limit or get_settings().notification_window_size


def list_recent_notifications(
    session: Session, *, recipient_id: str, limit: int | None = None
) -> NotificationSnapshot:
    """Return the newest notifications of ``recipient_id``."""

    records = NotificationRepository(session).list_for_recipient(
        recipient_id, limit=_window_size(limit)
    )
    return NotificationSnapshot(recipient_id=recipient_id, records=tuple(records))


def mark_notification_as_read(
    session: Session,
    *,
    recipient_id: str,
    notification_id: str,
    feed: NotificationChangeFeed | None = None,
) -> NotificationRecord:
    """Flag one notification as read; raises ``NotificationNotFoundError``."""

    saved = NotificationRepository(session).set_read_state(
        notification_id, recipient_id=recipient_id, is_read=True
    )
    (feed or notification_feed).publish(recipient_id)
    return saved


def mark_notifications_as_read(
    session: Session,
    *,
    recipient_id: str,
    notification_ids: Iterable[str],
    feed: NotificationChangeFeed | None = None,
) -> int:
    """Flag all ``notification_ids`` as read in a single transaction."""

    updated = NotificationRepository(session).mark_as_read(
        notification_ids, recipient_id=recipient_id
    )
    if updated:
        (feed or notification_feed).publish(recipient_id)
    return updated


def mark_window_as_read(
    session: Session,
    *,
    recipient_id: str,
    limit: int | None = None,
    feed: NotificationChangeFeed | None = None,
) -> int:
    """Mark the unread records of the current window as read.

    Only ids unread at the moment the window is read are touched; records
    created afterwards stay unread.
    """

    repository = NotificationRepository(session)
    unread_ids = repository.list_unread_ids_in_window(recipient_id, limit=_window_size(limit))
    return mark_notifications_as_read(
        session, recipient_id=recipient_id, notification_ids=unread_ids, feed=feed
    )


def delete_notification(
    session: Session,
    *,
    recipient_id: str,
    notification_id: str,
    feed: NotificationChangeFeed | None = None,
) -> None:
    """Delete one notification owned by ``recipient_id``."""

    NotificationRepository(session).delete(notification_id, recipient_id=recipient_id)
    (feed or notification_feed).publish(recipient_id)


__all__ = [
    "delete_notification",
    "list_recent_notifications",
    "mark_notification_as_read",
    "mark_notifications_as_read",
    "mark_window_as_read",
]
