"""Token pools, the stop-bookings flag and token issuance."""

from app.services.inventory.inventory_gate import InventoryGate, ReconcileReport, pool_maximum
from app.services.inventory.token_service import TokenService

__all__ = ["InventoryGate", "ReconcileReport", "TokenService", "pool_maximum"]
