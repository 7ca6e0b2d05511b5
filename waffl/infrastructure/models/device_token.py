"""SQLAlchemy model for push registration tokens."""

from sqlalchemy import Column, DateTime, String, Text

from waffl.infrastructure.database import Base


class DeviceTokenModel(Base):
    """Latest push token per user; a refresh replaces the previous row."""

    __tablename__ = "device_token"

    user_id = Column(String(128), primary_key=True)
    token = Column(Text, nullable=False)
    platform = Column(String(20), nullable=False, default="iOS")
    updated_at = Column(DateTime(), nullable=False)


__all__ = ["DeviceTokenModel"]
