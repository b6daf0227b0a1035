"""Car inventory and token schemas."""

from app.schemas.car.inventory import (
    CarInventoryResponse,
    InventoryUpdate,
    ReconcileResponse,
    StopBookingsUpdate,
    TokenPurchase,
    TokenResponse,
)

__all__ = [
    "CarInventoryResponse",
    "InventoryUpdate",
    "ReconcileResponse",
    "StopBookingsUpdate",
    "TokenPurchase",
    "TokenResponse",
]
