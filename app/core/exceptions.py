"""
Domain exceptions.

Each carries an ``ErrorCode`` and the HTTP status the API maps it to; the
handlers in ``app.main`` render ``to_dict()["error"]`` into the failure
envelope.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Machine readable codes returned in ``error.code``."""
    INTERNAL_ERROR = "INTERNAL_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    AUTHORIZATION_FAILED = "AUTHORIZATION_FAILED"

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"

    BOOKING_CONFLICT = "BOOKING_CONFLICT"
    RESOURCE_EXHAUSTED = "RESOURCE_EXHAUSTED"
    POLICY_VIOLATION = "POLICY_VIOLATION"

    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    EMAIL_SERVICE_ERROR = "EMAIL_SERVICE_ERROR"
    NOTIFICATION_SERVICE_ERROR = "NOTIFICATION_SERVICE_ERROR"


class BaseAppException(Exception):
    """Root of the domain exceptions: message, error code, details, HTTP status."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"


def _iso(value: Any) -> Any:
    return value.isoformat() if isinstance(value, datetime) else value


class ValidationError(BaseAppException):
    """Exception raised when data validation fails"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, List[str]]] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        status_code: int = 422
    ):
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, error_code, details, status_code)


class InvalidRangeError(BaseAppException):
    """Exception raised when a date range does not start before it ends"""

    def __init__(
        self,
        start: Any = None,
        end: Any = None,
        message: str = "Start date must be before end date"
    ):
        details = {"from": _iso(start), "to": _iso(end)}
        super().__init__(message, ErrorCode.INVALID_DATE_RANGE, details, 400)


class NotFoundError(BaseAppException):
    """Exception raised when a requested resource is not found"""

    def __init__(
        self,
        resource_type: str = "Resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None
    ):
        if not message:
            message = f"{resource_type} not found"
            if resource_id:
                message += f" (ID: {resource_id})"

        details = {
            "resource_type": resource_type,
            "resource_id": resource_id
        }
        super().__init__(message, ErrorCode.RESOURCE_NOT_FOUND, details, 404)


class AuthenticationError(BaseAppException):
    """Exception raised when the request carries no usable principal"""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, ErrorCode.AUTHENTICATION_FAILED, {}, 401)


class ForbiddenError(BaseAppException):
    """Exception raised when the acting user may not perform an operation"""

    def __init__(
        self,
        message: str = "Not authorized to perform this action",
        required_role: Optional[str] = None
    ):
        details = {"required_role": required_role} if required_role else {}
        super().__init__(message, ErrorCode.AUTHORIZATION_FAILED, details, 403)


class ConflictError(BaseAppException):
    """Exception raised when a date range overlaps existing bookings or blocks"""

    def __init__(
        self,
        message: str = "Date range conflicts with existing bookings or blocked dates",
        conflicting_booking_ids: Optional[List[str]] = None,
        conflicting_block_ids: Optional[List[str]] = None
    ):
        details = {
            "conflicting_booking_ids": conflicting_booking_ids or [],
            "conflicting_block_ids": conflicting_block_ids or [],
        }
        super().__init__(message, ErrorCode.BOOKING_CONFLICT, details, 409)


class ExhaustedError(BaseAppException):
    """Exception raised when a car's countable resource is already at zero"""

    def __init__(
        self,
        resource: str,
        car_id: Optional[str] = None,
        message: Optional[str] = None
    ):
        if not message:
            message = f"No {resource.replace('_', ' ')}s available for this car"
        details = {"resource": resource, "car_id": car_id}
        super().__init__(message, ErrorCode.RESOURCE_EXHAUSTED, details, 409)


class PolicyError(BaseAppException):
    """Exception raised when a manual override breaks a derived-state rule"""

    def __init__(
        self,
        message: str = "Operation not permitted by inventory policy",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, ErrorCode.POLICY_VIOLATION, details, 409)


class ExternalServiceError(BaseAppException):
    """
    Exception raised when email or notification delivery fails.

    Raised and caught inside the dispatch boundary; never propagated to
    the caller of a primary operation.
    """

    def __init__(
        self,
        service_name: str,
        message: str = "External service error",
        error_code: ErrorCode = ErrorCode.EXTERNAL_SERVICE_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        details = dict(details or {})
        details["service"] = service_name
        super().__init__(message, error_code, details, 502)


class EmailServiceError(ExternalServiceError):
    """Exception raised when email sending fails"""

    def __init__(self, message: str = "Email service error", recipient: Optional[str] = None):
        details = {"recipient": recipient} if recipient else {}
        super().__init__("email", message, ErrorCode.EMAIL_SERVICE_ERROR, details)


class NotificationServiceError(ExternalServiceError):
    """Exception raised when an in-app notification cannot be recorded"""

    def __init__(self, message: str = "Notification service error", recipient: Optional[str] = None):
        details = {"recipient": recipient} if recipient else {}
        super().__init__("notification", message, ErrorCode.NOTIFICATION_SERVICE_ERROR, details)


__all__ = [
    "ErrorCode",
    "BaseAppException",
    "ValidationError",
    "InvalidRangeError",
    "NotFoundError",
    "AuthenticationError",
    "ForbiddenError",
    "ConflictError",
    "ExhaustedError",
    "PolicyError",
    "ExternalServiceError",
    "EmailServiceError",
    "NotificationServiceError",
]
