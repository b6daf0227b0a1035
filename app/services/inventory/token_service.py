"""
Token issuance on top of the inventory gate.

Purchasing takes a unit from the car's pool before the token row is
written; dropping a token gives the unit back (clamped at the maximum).
"""

from sqlalchemy.orm import Session

from app.core.exceptions import ValidationError
from app.core.permissions import Actor, require_owner_or_privileged
from app.models.base.enums import InventoryResource, TokenStatus
from app.models.car import Token
from app.repositories.car import TokenRepository
from app.repositories.user import UserRepository
from app.services.base.base_service import BaseService, track_performance
from app.services.inventory.inventory_gate import InventoryGate
from app.utils.datetime_utils import utcnow


class TokenService(BaseService[Token, TokenRepository]):

    def __init__(self, db_session: Session, gate: InventoryGate = None):
        super().__init__(TokenRepository(db_session), db_session)
        self.user_repo = UserRepository(db_session)
        self.gate = gate or InventoryGate(db_session)

    @track_performance("purchase_token")
    def purchase_token(self, car_id: str, user_id: str, kind: InventoryResource) -> Token:
        """
        Issue a waitlist or book-now token.

        Raises:
            NotFoundError: If the car or user does not exist
            ExhaustedError: If the car's pool for ``kind`` is empty
        """
        kind = InventoryResource(kind)
        self.user_repo.get_by_id(user_id)
        self.gate.decrement(car_id, kind)

        try:
            with self.transaction():
                token = self.repository.create(Token(car_id=car_id, user_id=user_id, kind=kind))
        except Exception:
            self._logger.warning(f"Token insert failed for car {car_id}; returning {kind.value} to pool")
            self.gate.increment(car_id, kind)
            raise

        self._log_operation("purchase token", token.id, {"car_id": car_id, "kind": kind.value})
        return token

    @track_performance("drop_token")
    def drop_token(self, token_id: str, actor: Actor) -> Token:
        """Drop an active token and return its unit to the pool."""
        token = self.repository.get_by_id(token_id)
        require_owner_or_privileged(actor, token.user_id, "drop this token")
        if token.status == TokenStatus.DROPPED:
            raise ValidationError("Token has already been dropped", field_errors={"status": ["dropped"]})

        with self.transaction():
            self.repository.update(token, {"status": TokenStatus.DROPPED, "dropped_at": utcnow()})

        self.gate.increment(token.car_id, token.kind)
        self._log_operation("drop token", token.id, {"car_id": token.car_id})
        return token
