"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Iterable

from sqlalchemy.orm import Session

from waffl.domain.entities import (
    NotificationNotFoundError,
    NotificationRecord,
    NotificationType,
)
from waffl.infrastructure.models import NotificationModel
from waffl.utils import ensure_naive_utc, ensure_utc


class NotificationRepository:
    """Provide CRUD operations for :class:`NotificationRecord` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: str) -> NotificationRecord | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def list_for_recipient(
        self,
        recipient_id: str,
        *,
        limit: int | None = 50,
    ) -> Sequence[NotificationRecord]:
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.recipient_id == recipient_id)
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def list_unread_ids_in_window(self, recipient_id: str, *, limit: int) -> list[str]:
        """Return unread ids among the newest ``limit`` records only."""

        window = self.list_for_recipient(recipient_id, limit=limit)
        return [record.id for record in window if not record.is_read]

    def create(self, record: NotificationRecord) -> NotificationRecord:
        record.validate()
        model = NotificationModel()
        self._apply_entity_to_model(model, record)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def set_read_state(
        self, notification_id: str, *, recipient_id: str, is_read: bool
    ) -> NotificationRecord:
        try:
            model = self._apply_read_state(
                notification_id, recipient_id=recipient_id, is_read=is_read
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return self._to_entity(model)

    def mark_as_read(self, notification_ids: Iterable[str], *, recipient_id: str) -> int:
        """Flag every id as read inside one transaction.

        A missing id or any failure rolls back the whole batch, so either all
        records end up read or none of them change.
        """

        ids = list(dict.fromkeys(i for i in notification_ids if i))
        if not ids:
            return 0
        try:
            for notification_id in ids:
                self._apply_read_state(notification_id, recipient_id=recipient_id, is_read=True)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return len(ids)

    def delete(self, notification_id: str, *, recipient_id: str) -> None:
        model = self._get_owned(notification_id, recipient_id=recipient_id)
        self.session.delete(model)
        self.session.commit()

    def _apply_read_state(
        self, notification_id: str, *, recipient_id: str, is_read: bool
    ) -> NotificationModel:
        model = self._get_owned(notification_id, recipient_id=recipient_id)
        model.is_read = is_read
        self.session.flush()
        return model

    def _get_owned(self, notification_id: str, *, recipient_id: str) -> NotificationModel:
        model = self.session.get(NotificationModel, notification_id)
        if model is None or model.recipient_id != recipient_id:
            raise NotificationNotFoundError(notification_id)
        return model

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, record: NotificationRecord) -> None:
        model.id = record.id
        model.recipient_id = record.recipient_id
        model.sender_id = record.sender_id
        model.sender_name = record.sender_name
        model.sender_profile_image_url = record.sender_profile_image_url
        model.type = record.type.value
        model.video_id = record.video_id
        model.video_thumbnail_url = record.video_thumbnail_url
        model.comment_text = record.comment_text
        model.created_at = ensure_naive_utc(record.created_at)
        model.is_read = record.is_read

    @staticmethod
    def _to_entity(model: NotificationModel) -> NotificationRecord:
        return NotificationRecord(
            id=model.id,
            recipient_id=model.recipient_id,
            sender_id=model.sender_id,
            sender_name=model.sender_name,
            sender_profile_image_url=model.sender_profile_image_url,
            type=NotificationType.parse(model.type),
            video_id=model.video_id,
            video_thumbnail_url=model.video_thumbnail_url,
            comment_text=model.comment_text,
            created_at=ensure_utc(model.created_at),
            is_read=bool(model.is_read),
        )


__all__ = ["NotificationRepository"]
