"""
Order routes: create, capture and authorize PayPal orders
"""

from fastapi import APIRouter, Depends, Request

from api.proxy import read_json, relay
from api.schemas import CreateOrderRequest, ErrorResponse
from core.dependencies import get_payment_service, get_settings
from core.settings import Settings
from payments.paypal_service import PaymentService

router = APIRouter()

FAILURE = {500: {"model": ErrorResponse}}


@router.post("", responses=FAILURE)
async def create_order(
    request: Request,
    service: PaymentService = Depends(get_payment_service),
    settings: Settings = Depends(get_settings),
):
    """
    Create an order to start the transaction.

    The cart is accepted so the page can describe what is being bought, but the
    order is always created for the fixed demo amount.

    **Request Example:**
    ```json
    {"cart": [{"id": "YOUR_PRODUCT_ID", "quantity": "1"}]}
    ```
    """

    async def call():
        body = CreateOrderRequest.model_validate(await read_json(request))
        return await service.create_order(body.cart)

    return await relay(call, "Failed to create order.", settings)


@router.post("/{orderID}/capture", responses=FAILURE)
async def capture_order(
    orderID: str,
    service: PaymentService = Depends(get_payment_service),
    settings: Settings = Depends(get_settings),
):
    """Capture payment for an approved order to complete the transaction."""
    return await relay(
        lambda: service.capture_order(orderID), "Failed to capture order.", settings
    )


@router.post("/{orderID}/authorize", responses=FAILURE)
async def authorize_order(
    orderID: str,
    service: PaymentService = Depends(get_payment_service),
    settings: Settings = Depends(get_settings),
):
    """Authorize payment for an approved order; capture it later by authorization id."""
    return await relay(
        lambda: service.authorize_order(orderID), "Failed to authorize order.", settings
    )
