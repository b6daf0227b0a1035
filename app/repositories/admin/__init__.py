"""Admin repositories."""

from app.repositories.admin.admin_repository import AdminRepository

__all__ = ["AdminRepository"]
