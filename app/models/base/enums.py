"""
Database enums.

Provides SQLAlchemy-compatible enum definitions shared by models,
schemas and services.
"""

import enum


class ActorRole(str, enum.Enum):
    """Role of the principal performing an operation."""
    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "superadmin"


class AdminRole(str, enum.Enum):
    """Back-office account role."""
    ADMIN = "admin"
    SUPER_ADMIN = "superadmin"


class BookingStatus(str, enum.Enum):
    """Booking status. Only accepted bookings hold the car."""
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class InventoryResource(str, enum.Enum):
    """Countable per-car resources tracked by the inventory gate."""
    WAITLIST_TOKEN = "waitlist_token"
    BOOK_NOW_TOKEN = "book_now_token"


class TokenStatus(str, enum.Enum):
    """Lifecycle of an issued token."""
    ACTIVE = "active"
    DROPPED = "dropped"


class KYCStatus(str, enum.Enum):
    """KYC verification status."""
    PENDING = "pending"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class UserStatus(str, enum.Enum):
    """Account status."""
    ACTIVE = "active"
    SUSPENDED = "suspended"
    DEACTIVATED = "deactivated"


class RecipientModel(str, enum.Enum):
    """Kind of account a notification is addressed to."""
    USER = "User"
    ADMIN = "Admin"
    SUPER_ADMIN = "SuperAdmin"


class NotificationType(str, enum.Enum):
    """In-app notification types emitted by the core."""
    AMC_REMINDER = "amc_reminder"
    AMC_PENALTY = "amc_penalty"
    AMC_PENALTY_APPLIED = "amc_penalty_applied"
    AMC_PAYMENT_DONE = "amc_payment_done"
    USER_PAID_AMC = "user_paid_amc"
    BOOKING_DONE = "booking_done"
    USER_MADE_BOOKING = "user_made_booking"
    KYC_REMINDER = "kyc_reminder"
    USER_SUSPENSION_EXPIRED = "user_suspension_expired"


class NotificationPriority(str, enum.Enum):
    """Notification priority levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
