"""
API Schemas Module

This module defines Pydantic models for request/response validation.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CreateOrderRequest(BaseModel):
    """
    Body of POST /api/orders.

    The cart describes what the page is selling. It is never priced or
    validated server-side, so any shape (or none) is accepted.
    """

    cart: Any = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"cart": [{"id": "YOUR_PRODUCT_ID", "quantity": "1"}]}
        }
    )


class RefundRequest(BaseModel):
    captured_payment_id: str = Field(alias="capturedPaymentId", min_length=1)

    model_config = ConfigDict(populate_by_name=True)


class ErrorResponse(BaseModel):
    """Body returned when a proxied call fails."""

    error: str
