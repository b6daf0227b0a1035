"""
FastAPI dependencies shared by the v1 routes.

Example usage in a router:
    from fastapi import Depends, APIRouter
    from app.api import deps

    @router.get("/bookings")
    def list_bookings(actor: Actor = Depends(deps.get_current_actor)):
        ...
"""

from typing import Optional

from fastapi import Depends, Header

from app.core.exceptions import AuthenticationError, ForbiddenError
from app.core.permissions import Actor
from app.db.session import get_db
from app.models.base.enums import ActorRole

__all__ = ["get_db", "get_current_actor", "get_privileged_actor"]


def get_current_actor(
    x_actor_id: Optional[str] = Header(default=None),
    x_actor_role: Optional[str] = Header(default=None),
) -> Actor:
    """Principal taken from the ``X-Actor-Id`` / ``X-Actor-Role`` headers."""
    if not x_actor_id:
        raise AuthenticationError()
    try:
        role = ActorRole((x_actor_role or ActorRole.USER.value).lower())
    except ValueError:
        raise ForbiddenError(f"Unknown role: {x_actor_role}") from None
    return Actor(id=x_actor_id, role=role)


def get_privileged_actor(actor: Actor = Depends(get_current_actor)) -> Actor:
    if not actor.is_privileged:
        raise ForbiddenError("Admin access required", required_role=ActorRole.ADMIN.value)
    return actor
