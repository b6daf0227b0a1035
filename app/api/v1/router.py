"""
API v1 Router - Main Entry Point
Aggregates all v1 API endpoints of the fractional ownership backend
"""

from fastapi import APIRouter

from app.api.v1 import amc, blocked_dates, bookings, cars, kyc, tokens
from app.config.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(
    responses={
        400: {"description": "Bad Request"},
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
        409: {"description": "Conflict"},
        422: {"description": "Validation Error"},
        500: {"description": "Internal Server Error"},
    }
)

router.include_router(bookings.router, tags=["Booking Management"])
router.include_router(blocked_dates.router, tags=["Blocked Dates"])
router.include_router(cars.router, tags=["Car Inventory"])
router.include_router(tokens.router, tags=["Tokens"])
router.include_router(amc.router, tags=["AMC"])
router.include_router(kyc.router, tags=["KYC"])


@router.get("/health", tags=["System Health"])
def api_health_check():
    return {
        "status": "healthy",
        "api_version": "v1",
        "total_routes": len(router.routes),
    }


logger.info(f"API v1 router initialized with {len(router.routes)} routes")
