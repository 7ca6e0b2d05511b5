"""Endpoints recording the notification side effect of social interactions."""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from waffl.application.use_cases.notifications import notify_comment, notify_follow, notify_like
from waffl.application.use_cases.push import PushDispatcher
from waffl.domain.entities import NotificationRecord, SessionContext
from waffl.infrastructure.database import get_db
from waffl.interfaces.api.dependencies import get_current_session, get_dispatcher
from waffl.interfaces.api.schemas import (
    CommentInteraction,
    FollowInteraction,
    InteractionNotificationRead,
    LikeInteraction,
)

router = APIRouter(prefix="/interactions", tags=["interactions"])


def _to_response(record: NotificationRecord | None) -> InteractionNotificationRead:
    if record is None:
        return InteractionNotificationRead(created=False)
    return InteractionNotificationRead(created=True, notification_id=record.id)


@router.post(
    "/likes",
    response_model=InteractionNotificationRead,
    status_code=status.HTTP_202_ACCEPTED,
)
def record_like(
    payload: LikeInteraction,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current: SessionContext = Depends(get_current_session),
    dispatcher: PushDispatcher = Depends(get_dispatcher),
) -> InteractionNotificationRead:
    """Notify the video owner about a like; liking your own video is silent."""

    record = notify_like(
        db,
        sender=current,
        recipient_id=payload.recipient_id,
        video_id=payload.video_id,
        video_thumbnail_url=payload.video_thumbnail_url,
        dispatcher=dispatcher,
        schedule=background_tasks.add_task,
    )
    return _to_response(record)


@router.post(
    "/comments",
    response_model=InteractionNotificationRead,
    status_code=status.HTTP_202_ACCEPTED,
)
def record_comment(
    payload: CommentInteraction,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current: SessionContext = Depends(get_current_session),
    dispatcher: PushDispatcher = Depends(get_dispatcher),
) -> InteractionNotificationRead:
    record = notify_comment(
        db,
        sender=current,
        recipient_id=payload.recipient_id,
        video_id=payload.video_id,
        comment_text=payload.comment_text,
        video_thumbnail_url=payload.video_thumbnail_url,
        dispatcher=dispatcher,
        schedule=background_tasks.add_task,
    )
    return _to_response(record)


@router.post(
    "/follows",
    response_model=InteractionNotificationRead,
    status_code=status.HTTP_202_ACCEPTED,
)
def record_follow(
    payload: FollowInteraction,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current: SessionContext = Depends(get_current_session),
    dispatcher: PushDispatcher = Depends(get_dispatcher),
) -> InteractionNotificationRead:
    record = notify_follow(
        db,
        sender=current,
        recipient_id=payload.recipient_id,
        dispatcher=dispatcher,
        schedule=background_tasks.add_task,
    )
    return _to_response(record)


__all__ = ["router"]
