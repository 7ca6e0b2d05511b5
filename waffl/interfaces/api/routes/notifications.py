"""Endpoints and websocket handler for a user's notification window."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import Session

from waffl.application.use_cases.notifications import (
    delete_notification,
    list_recent_notifications,
    mark_notification_as_read,
    mark_notifications_as_read,
    mark_window_as_read,
)
from waffl.domain.entities import NotificationNotFoundError, NotificationRecord, SessionContext
from waffl.infrastructure.database import get_db
from waffl.infrastructure.notifications import NotificationSubscription, serialize_snapshot
from waffl.interfaces.api.dependencies import (
    get_current_session,
    get_notification_store,
    resolve_session,
)
from waffl.interfaces.api.schemas import (
    MarkReadResult,
    NotificationListRead,
    NotificationMarkReadRequest,
    NotificationRead,
    UnreadCountRead,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_schema(record: NotificationRecord) -> NotificationRead:
    return NotificationRead(
        id=record.id,
        recipient_id=record.recipient_id,
        sender_id=record.sender_id,
        sender_name=record.sender_name,
        sender_profile_image_url=record.sender_profile_image_url,
        type=record.type,
        video_id=record.video_id,
        video_thumbnail_url=record.video_thumbnail_url,
        comment_text=record.comment_text,
        created_at=record.created_at,
        is_read=record.is_read,
        time_ago=record.time_ago(),
    )


@router.get("/", response_model=NotificationListRead)
def list_notifications(
    db: Session = Depends(get_db),
    current: SessionContext = Depends(get_current_session),
) -> NotificationListRead:
    """Return the newest notifications for the authenticated user."""

    snapshot = list_recent_notifications(db, recipient_id=current.user_id)
    return NotificationListRead(
        notifications=[_notification_to_schema(record) for record in snapshot.records],
        unread_count=snapshot.unread_count,
        has_unread=snapshot.unread_count > 0,
    )


@router.get("/unread-count", response_model=UnreadCountRead)
def read_unread_count(
    db: Session = Depends(get_db),
    current: SessionContext = Depends(get_current_session),
) -> UnreadCountRead:
    snapshot = list_recent_notifications(db, recipient_id=current.user_id)
    return UnreadCountRead(
        unread_count=snapshot.unread_count, has_unread=snapshot.unread_count > 0
    )


@router.post("/read", response_model=MarkReadResult)
def mark_batch_as_read(
    payload: NotificationMarkReadRequest,
    db: Session = Depends(get_db),
    current: SessionContext = Depends(get_current_session),
) -> MarkReadResult:
    """Mark every listed notification as read or none of them."""

    try:
        updated = mark_notifications_as_read(
            db, recipient_id=current.user_id, notification_ids=payload.unique_ids()
        )
    except NotificationNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return MarkReadResult(updated=updated)


@router.post("/read-all", response_model=MarkReadResult)
def mark_all_as_read(
    db: Session = Depends(get_db),
    current: SessionContext = Depends(get_current_session),
) -> MarkReadResult:
    """Mark the unread notifications of the current window as read."""

    try:
        updated = mark_window_as_read(db, recipient_id=current.user_id)
    except NotificationNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return MarkReadResult(updated=updated)


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def mark_one_as_read(
    notification_id: str,
    db: Session = Depends(get_db),
    current: SessionContext = Depends(get_current_session),
) -> Response:
    try:
        mark_notification_as_read(
            db, recipient_id=current.user_id, notification_id=notification_id
        )
    except NotificationNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    current: SessionContext = Depends(get_current_session),
) -> Response:
    try:
        delete_notification(db, recipient_id=current.user_id, notification_id=notification_id)
    except NotificationNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


async def _stream_snapshots(websocket: WebSocket, subscription: NotificationSubscription) -> None:
    async for snapshot in subscription:
        await websocket.send_json({"type": "snapshot", "data": serialize_snapshot(snapshot)})


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams full notification windows to the user."""

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=1008)
        return

    try:
        current = resolve_session(token)
    except HTTPException:
        await websocket.close(code=1008)
        return

    await websocket.accept()
    store = get_notification_store()
    subscription = store.watch(current.user_id)
    pump = asyncio.create_task(_stream_snapshots(websocket, subscription))
    try:
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except (KeyError, ValueError):
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list) and ids:
                    try:
                        await store.mark_many_as_read(current.user_id, [str(i) for i in ids])
                    except NotificationNotFoundError:
                        logger.warning(
                            "Ignoring ack with unknown notifications for %s", current.user_id
                        )
                continue
    except WebSocketDisconnect:
        logger.debug("Notification websocket closed for %s", current.user_id)
    finally:
        subscription.close()
        pump.cancel()
        try:
            await pump
        except (asyncio.CancelledError, WebSocketDisconnect, RuntimeError):
            pass


__all__ = ["router"]
