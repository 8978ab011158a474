"""
PayPal Payment Service

This module maps each checkout action onto exactly one PayPal API call:
- Creating orders (fixed placeholder amount)
- Capturing or authorizing approved orders
- Capturing previously authorized payments
- Refunding captured payments
"""

import time
from collections.abc import Callable
from typing import Any

import structlog
from opentelemetry import trace
from starlette.concurrency import run_in_threadpool

from core.logging import BusinessEvents
from core.metrics import paypal_request_latency, paypal_requests_total
from payments.paypal_client import ApiResult, PayPalApiError, PayPalClient, PayPalError

log = structlog.get_logger(__name__)
tracer = trace.get_tracer(__name__)

# Demo pricing: the cart is not priced, every order charges this amount
ORDER_CURRENCY = "EUR"
ORDER_VALUE = "100"


class PaymentOperationError(Exception):
    """Generic failure of a payment operation; upstream detail stays in the logs."""

    def __init__(self, operation: str, upstream: ApiResult | None = None):
        self.operation = operation
        self.upstream = upstream
        super().__init__(f"PayPal {operation} failed")


class PaymentService:
    def __init__(self, client: PayPalClient):
        self.client = client

    async def create_order(self, cart: Any = None) -> ApiResult:
        payload = {
            "intent": "CAPTURE",
            "purchase_units": [
                {
                    "amount": {
                        "currency_code": ORDER_CURRENCY,
                        "value": ORDER_VALUE,
                    },
                },
            ],
        }
        cart_items = len(cart) if isinstance(cart, list) else 0
        log.info(BusinessEvents.ORDER_REQUESTED, cart_items=cart_items)
        return await self._call("create_order", self.client.create_order, payload)

    async def capture_order(self, order_id: str) -> ApiResult:
        return await self._call(
            "capture_order", self.client.capture_order, order_id, order_id=order_id
        )

    async def authorize_order(self, order_id: str) -> ApiResult:
        return await self._call(
            "authorize_order", self.client.authorize_order, order_id, order_id=order_id
        )

    async def capture_authorization(self, authorization_id: str) -> ApiResult:
        return await self._call(
            "capture_authorization",
            self.client.capture_authorization,
            authorization_id,
            False,
            authorization_id=authorization_id,
        )

    async def refund_capture(self, capture_id: str) -> ApiResult:
        return await self._call(
            "refund_capture",
            self.client.refund_capture,
            capture_id,
            capture_id=capture_id,
        )

    async def _call(
        self, operation: str, fn: Callable[..., ApiResult], *args, **context
    ) -> ApiResult:
        """
        Run one blocking PayPal call off the event loop.

        Logs, traces and counts the call. Any client error is logged with the
        upstream detail and re-raised as PaymentOperationError.
        """
        log.info(
            BusinessEvents.PAYMENT_ATTEMPT,
            operation=operation,
            provider="paypal",
            **context,
        )
        started = time.perf_counter()

        with tracer.start_as_current_span(f"paypal.{operation}") as span:
            span.set_attributes({f"paypal.{k}": v for k, v in context.items()})
            try:
                result = await run_in_threadpool(fn, *args)
            except PayPalApiError as e:
                paypal_requests_total.labels(
                    operation=operation, outcome="api_error"
                ).inc()
                span.set_attribute("http.status_code", e.status_code)
                log.error(
                    BusinessEvents.PAYMENT_FAILURE,
                    operation=operation,
                    provider="paypal",
                    status_code=e.status_code,
                    debug_id=e.debug_id,
                    issue=e.issue,
                    error=str(e),
                    **context,
                )
                raise PaymentOperationError(
                    operation, upstream=ApiResult(e.status_code, e.body)
                ) from e
            except PayPalError as e:
                paypal_requests_total.labels(
                    operation=operation, outcome="transport_error"
                ).inc()
                log.error(
                    BusinessEvents.PAYMENT_FAILURE,
                    operation=operation,
                    provider="paypal",
                    error=str(e),
                    **context,
                )
                raise PaymentOperationError(operation) from e
            finally:
                paypal_request_latency.labels(operation=operation).observe(
                    time.perf_counter() - started
                )

            span.set_attribute("http.status_code", result.status_code)

        paypal_requests_total.labels(operation=operation, outcome="success").inc()
        log.info(
            BusinessEvents.PAYMENT_SUCCESS,
            operation=operation,
            provider="paypal",
            status_code=result.status_code,
            paypal_id=result.body.get("id"),
            paypal_status=result.body.get("status"),
            **context,
        )
        return result
