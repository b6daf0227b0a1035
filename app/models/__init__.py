"""
Database models package.

Importing this package registers every mapped class on ``Base.metadata``.
"""

from app.models.base import Base, BaseModel, TimestampModel
from app.models.admin import Admin
from app.models.amc import AMC, AMCInstallment
from app.models.booking import BlockedDate, Booking
from app.models.car import Car, Token
from app.models.notification import Notification
from app.models.user import User

__all__ = [
    "Base",
    "BaseModel",
    "TimestampModel",
    "Admin",
    "AMC",
    "AMCInstallment",
    "BlockedDate",
    "Booking",
    "Car",
    "Token",
    "Notification",
    "User",
]
