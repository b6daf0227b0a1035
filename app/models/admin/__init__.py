"""Admin models."""

from app.models.admin.admin import Admin

__all__ = ["Admin"]
