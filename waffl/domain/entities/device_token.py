"""Domain entity representing a push registration token."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class DeviceToken:
    """Latest push token issued to a user's installed app."""

    user_id: str
    token: str
    platform: str = "iOS"
    updated_at: datetime | None = None

    @property
    def token_prefix(self) -> str:
        """Short prefix safe to include in log lines."""

        return self.token[:20]


__all__ = ["DeviceToken"]
