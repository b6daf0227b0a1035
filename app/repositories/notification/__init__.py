"""Notification repositories."""

from app.repositories.notification.notification_repository import NotificationRepository

__all__ = ["NotificationRepository"]
