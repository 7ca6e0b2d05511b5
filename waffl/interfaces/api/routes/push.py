"""Push send endpoint called by the dispatcher and trusted backends."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status

from waffl.application.use_cases.push import send_push_notification
from waffl.application.use_cases.push.send_push import PushProvider
from waffl.domain.entities import PUSH_ERROR_INVALID_ARGUMENT, PushEndpointError
from waffl.interfaces.api.dependencies import get_provider, verify_push_api_key
from waffl.interfaces.api.schemas import PushSendResponse

router = APIRouter(prefix="/push", tags=["push"])


def _error_status(error: PushEndpointError) -> int:
    if error.code == PUSH_ERROR_INVALID_ARGUMENT:
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@router.post(
    "/send",
    response_model=PushSendResponse,
    response_model_by_alias=True,
    dependencies=[Depends(verify_push_api_key)],
)
def send_push(
    payload: dict[str, Any] = Body(...),
    provider: PushProvider | None = Depends(get_provider),
) -> PushSendResponse:
    """Deliver one push message; failures are reported and never retried."""

    try:
        result = send_push_notification(payload, provider=provider)
    except PushEndpointError as exc:
        raise HTTPException(
            status_code=_error_status(exc),
            detail={"code": exc.code, "message": exc.message},
        ) from exc
    return PushSendResponse(success=result.success, message_id=result.message_id)


__all__ = ["router"]
