"""Explicit description of the signed-in user."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionContext:
    """Identity of the user acting in the current session.

    Components receive this object when they are built instead of reading a
    process-wide "current user".
    """

    user_id: str
    display_name: str
    profile_image_url: str | None = None


__all__ = ["SessionContext"]
