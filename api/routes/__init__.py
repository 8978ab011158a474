"""
API Routes Package

This module consolidates all routes served by the checkout proxy.
"""

from fastapi import APIRouter

from . import checkout
from . import orders
from . import payments

# Create main router
router = APIRouter()

router.include_router(orders.router, prefix="/api/orders", tags=["orders"])
router.include_router(payments.router, prefix="/api/payments", tags=["payments"])
# Authorization captures live outside /api, where the checkout page expects them
router.include_router(
    payments.authorizations_router, prefix="/orders", tags=["payments"]
)
router.include_router(checkout.router, tags=["checkout"])

# Export for use in main application
__all__ = ["router"]
