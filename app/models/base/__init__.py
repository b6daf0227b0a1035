"""
Base models package.

Provides base classes, mixins and enums for all database models.
"""

from app.models.base.base_model import (
    Base,
    BaseModel,
    TimestampModel,
    enum_type,
    new_id,
)
from app.models.base.mixins import AuditMixin, ContactMixin
from app.models.base.enums import (
    ActorRole,
    AdminRole,
    BookingStatus,
    InventoryResource,
    KYCStatus,
    NotificationPriority,
    NotificationType,
    RecipientModel,
    TokenStatus,
    UserStatus,
)

__all__ = [
    "Base",
    "BaseModel",
    "TimestampModel",
    "enum_type",
    "new_id",
    "AuditMixin",
    "ContactMixin",
    "ActorRole",
    "AdminRole",
    "BookingStatus",
    "InventoryResource",
    "KYCStatus",
    "NotificationPriority",
    "NotificationType",
    "RecipientModel",
    "TokenStatus",
    "UserStatus",
]
