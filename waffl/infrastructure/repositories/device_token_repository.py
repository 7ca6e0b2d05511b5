"""Persistence helpers for push registration tokens."""

from __future__ import annotations

from sqlalchemy.orm import Session

from waffl.domain.entities import DeviceToken
from waffl.infrastructure.models import DeviceTokenModel
from waffl.utils import ensure_naive_utc, ensure_utc, utc_now


class DeviceTokenRepository:
    """Store the latest push token of each user."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str) -> DeviceToken | None:
        model = self.session.get(DeviceTokenModel, user_id)
        return self._to_entity(model) if model else None

    def save(self, token: DeviceToken) -> DeviceToken:
        """Insert or overwrite the token stored for ``token.user_id``."""

        model = self.session.get(DeviceTokenModel, token.user_id)
        if model is None:
            model = DeviceTokenModel(user_id=token.user_id)
            self.session.add(model)
        model.token = token.token
        model.platform = token.platform
        model.updated_at = ensure_naive_utc(token.updated_at or utc_now())
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: DeviceTokenModel) -> DeviceToken:
        return DeviceToken(
            user_id=model.user_id,
            token=model.token,
            platform=model.platform,
            updated_at=ensure_utc(model.updated_at),
        )


__all__ = ["DeviceTokenRepository"]
