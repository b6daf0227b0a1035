"""AMC payments: marking installments paid freezes their penalty."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from app.core.permissions import Actor, require_privileged
from app.models.amc import AMC, AMCInstallment
from app.models.base.enums import NotificationType
from app.repositories.amc import AMCRepository
from app.services.base.base_service import BaseService, track_performance
from app.services.base.notification_dispatcher import NotificationDispatcher
from app.utils.datetime_utils import to_naive_utc, utcnow


class AMCService(BaseService[AMC, AMCRepository]):

    def __init__(self, db_session: Session, dispatcher: Optional[NotificationDispatcher] = None):
        super().__init__(AMCRepository(db_session), db_session)
        self.dispatcher = dispatcher or NotificationDispatcher(db_session)

    def get_amc(self, amc_id: str) -> AMC:
        return self.repository.get_by_id(amc_id)

    @track_performance("mark_amc_installment_paid")
    def mark_installment_paid(
        self,
        amc_id: str,
        position: int,
        actor: Actor,
        paid: bool = True,
        paid_date: Optional[datetime] = None,
    ) -> AMCInstallment:
        """
        Record payment (or un-payment) of one installment. Admin only.

        Raises:
            NotFoundError: If the AMC or the installment position does not exist
        """
        require_privileged(actor, "update AMC payments")
        amc = self.repository.get_by_id(amc_id)
        installment = self.repository.get_installment(amc, position)
        was_paid = installment.paid

        with self.transaction():
            installment.paid = paid
            installment.paid_date = (to_naive_utc(paid_date) or utcnow()) if paid else None
            self.db.flush()

        self._log_operation("mark AMC installment paid", amc.id, {"position": position, "paid": paid})
        if paid and not was_paid:
            self._announce_payment(amc, installment)
        return installment

    def _announce_payment(self, amc: AMC, installment: AMCInstallment) -> None:
        car_name = amc.car.name if amc.car else ""
        amount = Decimal(installment.amount) + Decimal(installment.penalty or 0)
        metadata = {
            "amc_id": amc.id,
            "car_name": car_name,
            "year": installment.year,
            "total_amount": str(amount),
        }
        self.dispatcher.notify_user(
            amc.user_id,
            NotificationType.AMC_PAYMENT_DONE,
            "AMC Payment Confirmed!",
            f"Your Annual Maintenance Charge payment for {car_name} has been confirmed. Thank you for your payment.",
            metadata,
            amc.id,
        )
        user = amc.user
        self.dispatcher.notify_admins(
            NotificationType.USER_PAID_AMC,
            "User Paid AMC",
            f"{user.name if user else 'A user'} has made an AMC payment for {car_name}.",
            dict(metadata, user_name=user.name if user else None, user_email=user.email if user else None),
            amc.id,
        )
