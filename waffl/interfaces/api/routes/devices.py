"""Endpoint storing the push token of the caller's device."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from waffl.application.use_cases.push import register_device_token
from waffl.domain.entities import SessionContext
from waffl.infrastructure.database import get_db
from waffl.interfaces.api.dependencies import get_current_session
from waffl.interfaces.api.schemas import DeviceTokenRead, DeviceTokenUpdate

router = APIRouter(prefix="/devices", tags=["devices"])


@router.put("/token", response_model=DeviceTokenRead)
def update_device_token(
    payload: DeviceTokenUpdate,
    db: Session = Depends(get_db),
    current: SessionContext = Depends(get_current_session),
) -> DeviceTokenRead:
    """Replace the stored token; the most recent registration wins."""

    try:
        saved = register_device_token(
            db, user_id=current.user_id, token=payload.token, platform=payload.platform
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return DeviceTokenRead(
        user_id=saved.user_id,
        platform=saved.platform,
        token_prefix=saved.token_prefix,
        updated_at=saved.updated_at,
    )


__all__ = ["router"]
