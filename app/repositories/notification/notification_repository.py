"""Notification repository."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.base.enums import NotificationType, RecipientModel
from app.models.notification import Notification
from app.repositories.base.base_repository import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """Repository for in-app notifications."""

    def __init__(self, db: Session):
        super().__init__(Notification, db)

    def find_for_recipient(
        self,
        recipient_id: str,
        recipient_model: RecipientModel,
        type: Optional[NotificationType] = None,
    ) -> List[Notification]:
        stmt = select(Notification).where(
            Notification.recipient_id == recipient_id,
            Notification.recipient_model == recipient_model,
        )
        if type is not None:
            stmt = stmt.where(Notification.type == type)
        return self._all(stmt.order_by(Notification.created_at.desc()))
