"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Boolean, Column, DateTime, Index, String, Text

from waffl.infrastructure.database import Base


class NotificationModel(Base):
    """Database representation for like, comment and follow notifications."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_recipient_created", "recipient_id", "created_at"),
    )

    id = Column(String(36), primary_key=True)
    recipient_id = Column(String(128), nullable=False, index=True)
    sender_id = Column(String(128), nullable=False)
    sender_name = Column(String(120), nullable=False)
    sender_profile_image_url = Column(Text, nullable=True)
    type = Column(String(20), nullable=False)
    video_id = Column(String(128), nullable=True)
    video_thumbnail_url = Column(Text, nullable=True)
    comment_text = Column(Text, nullable=True)
    created_at = Column(DateTime(), nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)


__all__ = ["NotificationModel"]
