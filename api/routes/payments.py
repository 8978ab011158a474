"""
Payment routes: capture authorizations and refund captures
"""

from fastapi import APIRouter, Depends, Request

from api.proxy import read_json, relay
from api.schemas import ErrorResponse, RefundRequest
from core.dependencies import get_payment_service, get_settings
from core.settings import Settings
from payments.paypal_service import PaymentService

router = APIRouter()
authorizations_router = APIRouter()

FAILURE = {500: {"model": ErrorResponse}}


@router.post("/refund", responses=FAILURE)
async def refund_captured_payment(
    request: Request,
    service: PaymentService = Depends(get_payment_service),
    settings: Settings = Depends(get_settings),
):
    """
    Refund a captured payment in full.

    **Request Example:**
    ```json
    {"capturedPaymentId": "7TK53561YB803214S"}
    ```
    """

    async def call():
        body = RefundRequest.model_validate(await read_json(request))
        return await service.refund_capture(body.captured_payment_id)

    return await relay(call, "Failed refund captured payment.", settings)


@authorizations_router.post("/{authorizationId}/captureAuthorize", responses=FAILURE)
async def capture_authorization(
    authorizationId: str,
    service: PaymentService = Depends(get_payment_service),
    settings: Settings = Depends(get_settings),
):
    """Capture a previously authorized payment, leaving the authorization open."""
    return await relay(
        lambda: service.capture_authorization(authorizationId),
        "Failed to capture authorize.",
        settings,
    )
