"""Account status housekeeping: lifting suspensions whose end date has passed."""

from datetime import datetime
from typing import Dict, Optional

from sqlalchemy.orm import Session

from app.models.base.enums import NotificationType, UserStatus
from app.models.user import User
from app.repositories.user import UserRepository
from app.services.base.base_service import BaseService, track_performance
from app.services.base.notification_dispatcher import NotificationDispatcher
from app.utils.datetime_utils import to_naive_utc, utcnow


class UserStatusService(BaseService[User, UserRepository]):

    def __init__(self, db_session: Session, dispatcher: Optional[NotificationDispatcher] = None):
        super().__init__(UserRepository(db_session), db_session)
        self.dispatcher = dispatcher or NotificationDispatcher(db_session)

    @track_performance("release_expired_suspensions")
    def release_expired_suspensions(self, now: Optional[datetime] = None) -> Dict[str, int]:
        """Reactivate suspended users whose suspension has ended."""
        now = to_naive_utc(now) or utcnow()
        users = self.repository.find_expired_suspensions(now)
        reactivated = 0

        for user in users:
            user_id = user.id
            try:
                with self.transaction():
                    self.repository.update(user, {
                        "status": UserStatus.ACTIVE,
                        "suspension_end_date": None,
                        "suspension_reason": None,
                    })
            except Exception as e:
                self._logger.error(f"Error reactivating user {user_id}: {e}", exc_info=True)
                continue

            reactivated += 1
            self.dispatcher.notify_user(
                user.id,
                NotificationType.USER_SUSPENSION_EXPIRED,
                "Suspension Expired",
                "Your account suspension has expired and your account has been automatically "
                "reactivated. You can now access all features again.",
                {"user_name": user.name},
                user.id,
            )

        self._logger.info(f"Suspension check completed. {reactivated} users reactivated.")
        return {"reactivated_count": reactivated, "total_checked": len(users)}
