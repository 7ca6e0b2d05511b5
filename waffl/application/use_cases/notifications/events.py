"""Utility helpers to generate and dispatch interaction notifications."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from waffl.application.use_cases.push import PushDispatcher, PushScheduler, get_push_dispatcher
from waffl.domain.entities import (
    NotificationRecord,
    NotificationType,
    SessionContext,
    build_notification,
)
from waffl.infrastructure.notifications import NotificationChangeFeed, notification_feed
from waffl.infrastructure.repositories import NotificationRepository

logger = logging.getLogger(__name__)


def build_push_content(record: NotificationRecord) -> tuple[str, str, dict[str, Any]]:
    """Return the push title, body and data payload announcing ``record``."""

    title = record.type.push_title
    data: dict[str, Any] = {"type": record.type.value, "senderId": record.sender_id}
    if record.type is NotificationType.COMMENT:
        body = f"{record.sender_name}: {record.comment_text}"
        data["commentText"] = record.comment_text
    else:
        body = f"{record.sender_name} {record.type.action_text}"
    if record.video_id:
        data["videoId"] = record.video_id
    return title, body, data


def _emit_notification(
    session: Session,
    notification_type: NotificationType,
    *,
    sender: SessionContext,
    recipient_id: str,
    dispatcher: PushDispatcher | None,
    feed: NotificationChangeFeed | None,
    schedule: PushScheduler | None,
    **details: Any,
) -> NotificationRecord | None:
    """Persist one notification and request its push.

    Failures are logged and reported as ``None``; they never reach the
    interaction that triggered the notification.
    """

    if recipient_id == sender.user_id:
        return None

    try:
        record = build_notification(
            notification_type,
            recipient_id=recipient_id,
            sender_id=sender.user_id,
            sender_name=sender.display_name,
            sender_profile_image_url=sender.profile_image_url,
            **details,
        )
        saved = NotificationRepository(session).create(record)
    except Exception:
        session.rollback()
        logger.exception(
            "Error creating %s notification for %s", notification_type.value, recipient_id
        )
        return None

    logger.info("Notification created: %s for %s", saved.type.value, saved.recipient_id)
    try:
        (feed or notification_feed).publish(saved.recipient_id)
    except Exception:
        logger.exception("Could not signal live views of %s", saved.recipient_id)

    title, body, data = build_push_content(saved)
    try:
        (dispatcher or get_push_dispatcher()).schedule(
            saved.recipient_id, title=title, body=body, data=data, scheduler=schedule
        )
    except Exception:
        logger.exception("Could not schedule push for notification %s", saved.id)
    return saved


def notify_like(
    session: Session,
    *,
    sender: SessionContext,
    recipient_id: str,
    video_id: str,
    video_thumbnail_url: str | None = None,
    dispatcher: PushDispatcher | None = None,
    feed: NotificationChangeFeed | None = None,
    schedule: PushScheduler | None = None,
) -> NotificationRecord | None:
    """Tell the video owner that ``sender`` liked their video."""

    return _emit_notification(
        session,
        NotificationType.LIKE,
        sender=sender,
        recipient_id=recipient_id,
        dispatcher=dispatcher,
        feed=feed,
        schedule=schedule,
        video_id=video_id,
        video_thumbnail_url=video_thumbnail_url,
    )


def notify_comment(
    session: Session,
    *,
    sender: SessionContext,
    recipient_id: str,
    video_id: str,
    comment_text: str,
    video_thumbnail_url: str | None = None,
    dispatcher: PushDispatcher | None = None,
    feed: NotificationChangeFeed | None = None,
    schedule: PushScheduler | None = None,
) -> NotificationRecord | None:
    """Tell the video owner that ``sender`` commented on their video."""

    return _emit_notification(
        session,
        NotificationType.COMMENT,
        sender=sender,
        recipient_id=recipient_id,
        dispatcher=dispatcher,
        feed=feed,
        schedule=schedule,
        video_id=video_id,
        video_thumbnail_url=video_thumbnail_url,
        comment_text=comment_text,
    )


def notify_follow(
    session: Session,
    *,
    sender: SessionContext,
    recipient_id: str,
    dispatcher: PushDispatcher | None = None,
    feed: NotificationChangeFeed | None = None,
    schedule: PushScheduler | None = None,
) -> NotificationRecord | None:
    """Tell ``recipient_id`` that ``sender`` started following them."""

    return _emit_notification(
        session,
        NotificationType.FOLLOW,
        sender=sender,
        recipient_id=recipient_id,
        dispatcher=dispatcher,
        feed=feed,
        schedule=schedule,
    )


__all__ = ["build_push_content", "notify_comment", "notify_follow", "notify_like"]
