"""Pydantic models for interactions that notify another user."""

from __future__ import annotations

from pydantic import BaseModel, Field


class LikeInteraction(BaseModel):
    recipient_id: str = Field(..., min_length=1, description="Owner of the liked video")
    video_id: str = Field(..., min_length=1)
    video_thumbnail_url: str | None = None


class CommentInteraction(BaseModel):
    recipient_id: str = Field(..., min_length=1, description="Owner of the commented video")
    video_id: str = Field(..., min_length=1)
    video_thumbnail_url: str | None = None
    comment_text: str = Field(..., min_length=1, max_length=2000)


class FollowInteraction(BaseModel):
    recipient_id: str = Field(..., min_length=1, description="User being followed")


class InteractionNotificationRead(BaseModel):
    """Outcome of the notification side effect of an interaction."""

    created: bool
    notification_id: str | None = None


__all__ = [
    "CommentInteraction",
    "FollowInteraction",
    "InteractionNotificationRead",
    "LikeInteraction",
]
