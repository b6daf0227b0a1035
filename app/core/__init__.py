"""Core application modules."""

from app.core.permissions import Actor, require_owner_or_privileged, require_privileged

__all__ = ["Actor", "require_owner_or_privileged", "require_privileged"]
