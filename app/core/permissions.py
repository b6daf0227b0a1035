"""
Actor and role checks used by the service layer.

Usage:
    from app.core.permissions import Actor, require_privileged

    require_privileged(actor, "update booking status")
"""

from dataclasses import dataclass
from typing import Optional

from app.core.exceptions import ForbiddenError
from app.models.base.enums import ActorRole, RecipientModel

PRIVILEGED_ROLES = frozenset({ActorRole.ADMIN, ActorRole.SUPER_ADMIN})


@dataclass(frozen=True)
class Actor:
    """
    The principal performing an operation.

    Attributes:
        id: Account id (a user id or an admin id)
        role: user, admin or superadmin
    """
    id: str
    role: ActorRole

    @property
    def is_privileged(self) -> bool:
        return self.role in PRIVILEGED_ROLES

    @property
    def recipient_model(self) -> RecipientModel:
        if self.role == ActorRole.SUPER_ADMIN:
            return RecipientModel.SUPER_ADMIN
        if self.role == ActorRole.ADMIN:
            return RecipientModel.ADMIN
        return RecipientModel.USER

    def owns(self, user_id: Optional[str]) -> bool:
        return user_id is not None and self.id == user_id


def require_privileged(actor: Actor, action: str = "perform this action") -> None:
    """Raise ``ForbiddenError`` unless the actor is an admin or superadmin."""
    if not actor.is_privileged:
        raise ForbiddenError(f"Only admins can {action}", required_role=ActorRole.ADMIN.value)


def require_owner_or_privileged(actor: Actor, owner_id: Optional[str], action: str = "perform this action") -> None:
    if not (actor.is_privileged or actor.owns(owner_id)):
        raise ForbiddenError(f"Not authorized to {action}")


__all__ = [
    "Actor",
    "PRIVILEGED_ROLES",
    "require_privileged",
    "require_owner_or_privileged",
]
