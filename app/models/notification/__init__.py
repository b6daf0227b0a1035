"""Notification models."""

from app.models.notification.notification import Notification

__all__ = ["Notification"]
