"""
In-app notification model.

Notifications are addressed to a user, admin or superadmin account and
carry a type, a short title and message, and free-form metadata.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Boolean, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base.base_model import TimestampModel, enum_type
from app.models.base.enums import NotificationPriority, NotificationType, RecipientModel

__all__ = ["Notification"]


class Notification(TimestampModel):
    """
    In-app notification record.

    Attributes:
        recipient_id: Id of the receiving account
        recipient_model: Which table ``recipient_id`` refers to
        type: Notification category
        title: Short heading
        message: Body text
        metadata_: Structured context (amounts, dates, ids)
        priority: low, medium or high
        related_entity_id: Entity the notification is about
        is_read: Whether the recipient has opened it
    """

    __tablename__ = "notifications"

    recipient_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    recipient_model: Mapped[RecipientModel] = mapped_column(
        enum_type(RecipientModel),
        nullable=False,
    )
    type: Mapped[NotificationType] = mapped_column(
        enum_type(NotificationType, length=50),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    metadata_: Mapped[Dict[str, Any]] = mapped_column(
        "metadata",
        JSON,
        nullable=False,
        default=dict,
    )
    priority: Mapped[NotificationPriority] = mapped_column(
        enum_type(NotificationPriority),
        nullable=False,
        default=NotificationPriority.MEDIUM,
    )
    related_entity_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    read_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    __table_args__ = (
        Index("ix_notifications_recipient", "recipient_model", "recipient_id"),
    )
