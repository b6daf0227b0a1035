"""
Inventory gate: the only writer of a car's token pools and of its
derived ``stop_bookings`` flag.

Counter changes are single conditional UPDATE statements. After every
counter change the flag is recomputed in its own step; a failure there is
logged and leaves the counter change in place.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from sqlalchemy.orm import Session

from app.config.settings import settings
from app.core.exceptions import ExhaustedError, PolicyError, ValidationError
from app.core.permissions import Actor, require_privileged
from app.models.base.enums import InventoryResource
from app.models.car import Car
from app.repositories.car import CarRepository
from app.services.base.base_service import BaseService, track_performance

STOP_BOOKINGS_POLICY_MESSAGE = (
    "Cannot enable bookings while both waitlist and book-now tokens are exhausted"
)


def pool_maximum(resource: InventoryResource) -> int:
    if InventoryResource(resource) == InventoryResource.WAITLIST_TOKEN:
        return settings.WAITLIST_TOKENS_MAX
    return settings.BOOK_NOW_TOKENS_MAX


@dataclass
class ReconcileReport:
    """Result of one stop-bookings reconciliation pass."""
    total_checked: int = 0
    bookings_stopped: int = 0
    cars_updated: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "total_checked": self.total_checked,
            "bookings_stopped": self.bookings_stopped,
            "cars_updated": self.cars_updated,
        }


class InventoryGate(BaseService[Car, CarRepository]):
    """Atomic token-pool counters and the stop-bookings policy."""

    def __init__(self, db_session: Session):
        super().__init__(CarRepository(db_session), db_session)

    # -------------------------------------------------------------------------
    # Counters
    # -------------------------------------------------------------------------

    def decrement(self, car_id: str, resource: InventoryResource) -> Car:
        """
        Take one unit from a pool.

        Raises:
            NotFoundError: If the car does not exist
            ExhaustedError: If the pool is already at zero
        """
        resource = InventoryResource(resource)
        with self.transaction():
            taken = self.repository.atomic_decrement(car_id, resource)
            if not taken:
                self.repository.get_by_id(car_id)
                raise ExhaustedError(resource.value, car_id)
        self._log_operation("decrement pool", car_id, {"resource": resource.value})
        self._recompute_after_mutation(car_id)
        return self.repository.get_by_id(car_id)

    def increment(self, car_id: str, resource: InventoryResource) -> bool:
        """
        Return one unit to a pool.

        Increments past the pool maximum are clamped silently.

        Returns:
            True if the pool grew, False if it was already full
        """
        resource = InventoryResource(resource)
        with self.transaction():
            returned = self.repository.atomic_increment(car_id, resource, pool_maximum(resource))
            if not returned:
                self.repository.get_by_id(car_id)
        if returned:
            self._log_operation("increment pool", car_id, {"resource": resource.value})
        else:
            self._logger.info(f"{resource.value} pool of car {car_id} already full; increment clamped")
        self._recompute_after_mutation(car_id)
        return returned

    # -------------------------------------------------------------------------
    # Derived flag
    # -------------------------------------------------------------------------

    def recompute_stop_bookings(self, car_id: str) -> bool:
        """Force ``stop_bookings`` on when both pools are empty. Returns True if it changed."""
        with self.transaction():
            changed = self.repository.force_stop_bookings_if_exhausted(car_id)
        if changed:
            self._logger.info(f"Stopped bookings for car {car_id}: all tokens exhausted")
        return changed

    @track_performance("set_stop_bookings")
    def set_stop_bookings(self, car_id: str, value: bool, actor: Actor) -> Car:
        """
        Manually set the flag. Admin only.

        Raises:
            PolicyError: If re-enabling bookings while both pools are empty
        """
        require_privileged(actor, "change booking availability")
        car = self.repository.get_by_id(car_id)
        if not value and car.pools_exhausted:
            raise PolicyError(STOP_BOOKINGS_POLICY_MESSAGE, {"car_id": car_id})
        with self.transaction():
            self.repository.update(car, {"stop_bookings": bool(value)})
        self._log_operation("set stop bookings", car_id, {"value": bool(value)})
        return car

    @track_performance("update_inventory")
    def update_inventory(
        self,
        car_id: str,
        actor: Actor,
        waitlist_tokens: Optional[int] = None,
        book_now_tokens: Optional[int] = None,
        stop_bookings: Optional[bool] = None,
    ) -> Car:
        """
        Admin edit of pool sizes and the flag.

        The stop-bookings policy is applied to the resulting counters: an
        explicit re-enable is refused when both end at zero, and the flag is
        forced on in that case otherwise.
        """
        require_privileged(actor, "edit car inventory")
        field_errors = {}
        if waitlist_tokens is not None and not 0 <= waitlist_tokens <= settings.WAITLIST_TOKENS_MAX:
            field_errors["waitlist_tokens"] = [
                f"Waitlist tokens must be between 0 and {settings.WAITLIST_TOKENS_MAX}"
            ]
        if book_now_tokens is not None and not 0 <= book_now_tokens <= settings.BOOK_NOW_TOKENS_MAX:
            field_errors["book_now_tokens"] = [
                f"Book now tokens must be between 0 and {settings.BOOK_NOW_TOKENS_MAX}"
            ]
        if field_errors:
            raise ValidationError("Invalid inventory values", field_errors=field_errors)

        car = self.repository.get_by_id(car_id)
        waitlist = car.waitlist_tokens_available if waitlist_tokens is None else waitlist_tokens
        book_now = car.book_now_tokens_available if book_now_tokens is None else book_now_tokens
        exhausted = waitlist == 0 and book_now == 0

        if stop_bookings is False and exhausted:
            raise PolicyError(STOP_BOOKINGS_POLICY_MESSAGE, {"car_id": car_id})

        changes = {"waitlist_tokens_available": waitlist, "book_now_tokens_available": book_now}
        if stop_bookings is not None:
            changes["stop_bookings"] = stop_bookings
        if exhausted:
            changes["stop_bookings"] = True

        with self.transaction():
            self.repository.update(car, changes)
        self._log_operation("update inventory", car_id, {"fields": sorted(changes)})
        return car

    # -------------------------------------------------------------------------
    # Reconciliation
    # -------------------------------------------------------------------------

    @track_performance("reconcile_stop_bookings")
    def reconcile_all(self) -> ReconcileReport:
        """Stop bookings on every open car whose pools are both empty."""
        report = ReconcileReport()
        for car in self.repository.find_exhausted_open_cars():
            report.total_checked += 1
            try:
                if self.recompute_stop_bookings(car.id):
                    report.bookings_stopped += 1
                    report.cars_updated += 1
            except Exception as e:
                self._logger.error(f"Error reconciling stop bookings for car {car.id}: {e}", exc_info=True)
        self._logger.info(
            f"Stop-bookings reconciliation: {report.bookings_stopped} of {report.total_checked} cars stopped"
        )
        return report

    def _recompute_after_mutation(self, car_id: str) -> None:
        try:
            self.recompute_stop_bookings(car_id)
        except Exception as e:
            self._logger.error(
                f"Failed to recompute stop bookings for car {car_id}; counter change kept: {e}",
                exc_info=True,
            )
