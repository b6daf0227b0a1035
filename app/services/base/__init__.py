"""
Base services module.

Provides the service base class, the performance-tracking decorator and
the best-effort notification dispatcher.
"""

from app.services.base.base_service import BaseService, track_performance
from app.services.base.notification_dispatcher import (
    NotificationDispatcher,
    should_send_email,
)

__all__ = [
    "BaseService",
    "track_performance",
    "NotificationDispatcher",
    "should_send_email",
]
