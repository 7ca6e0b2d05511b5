"""Pydantic models for device registration and the push send endpoint."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class DeviceTokenUpdate(BaseModel):
    """Token issued to the app by the push provider."""

    token: str = Field(..., min_length=1)
    platform: str = Field(default="iOS", min_length=1, max_length=20)


class DeviceTokenRead(BaseModel):
    user_id: str
    platform: str
    token_prefix: str
    updated_at: datetime | None = None


class PushSendResponse(BaseModel):
    """Answer of the push send endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message_id: str = Field(serialization_alias="messageId")


__all__ = ["DeviceTokenRead", "DeviceTokenUpdate", "PushSendResponse"]
