"""User models."""

from app.models.user.user import User, default_email_preferences

__all__ = ["User", "default_email_preferences"]
