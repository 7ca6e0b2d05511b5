"""Use case for storing refreshed device tokens."""

import logging

from sqlalchemy.orm import Session

from waffl.domain.entities import DeviceToken
from waffl.infrastructure.repositories import DeviceTokenRepository
from waffl.utils import utc_now

logger = logging.getLogger(__name__)


def register_device_token(
    session: Session, *, user_id: str, token: str, platform: str = "iOS"
) -> DeviceToken:
    """Overwrite the token stored for ``user_id`` with ``token``."""

    if not token:
        raise ValueError("Device token is required")
    saved = DeviceTokenRepository(session).save(
        DeviceToken(user_id=user_id, token=token, platform=platform, updated_at=utc_now())
    )
    logger.info("Device token saved for user %s: %s...", user_id, saved.token_prefix)
    return saved
