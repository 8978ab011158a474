"""
Checkout Client

Python counterpart of the checkout page script. It calls the proxy endpoints
and interprets their JSON the same way the page's createOrder and onApprove
callbacks do, returning an Outcome instead of touching the DOM.
"""

import json
from typing import Any
from urllib.parse import quote

import requests
import structlog

from checkout.outcomes import (
    CheckoutError,
    Failure,
    Outcome,
    RecoverableDecline,
    RefundResult,
    Success,
    Transaction,
)

log = structlog.get_logger(__name__)

DEFAULT_CART = [{"id": "YOUR_PRODUCT_ID", "quantity": "YOUR_PRODUCT_QUANTITY"}]
JSON_HEADERS = {"Content-Type": "application/json"}


def describe_error(order_data: dict[str, Any]) -> str:
    """Format PayPal's first error detail, or the whole body when there is none."""
    details = order_data.get("details") or []
    if details:
        detail = details[0]
        return (
            f"{detail.get('issue')} {detail.get('description')} "
            f"({order_data.get('debug_id')})"
        )
    return json.dumps(order_data)


def find_transaction(order_data: dict[str, Any]) -> Transaction | None:
    """Pick the first capture, or failing that the first authorization."""
    units = order_data.get("purchase_units") or []
    payments = (units[0].get("payments") or {}) if units else {}
    records = (payments.get("captures") or []) or (payments.get("authorizations") or [])
    if not records:
        return None
    record = records[0]
    return Transaction(id=record.get("id"), status=record.get("status"), raw=record)


def classify_capture(order_data: dict[str, Any], card: bool = False) -> Outcome:
    """
    Decide what a capture response means for the buyer.

    - INSTRUMENT_DECLINED outside the card-fields flow can be retried with
      another funding source.
    - Any other error detail, a missing transaction or a DECLINED status is
      final.
    - Anything else is a completed payment.
    """
    transaction = find_transaction(order_data)
    details = order_data.get("details") or []
    error_detail = details[0] if details else None

    if error_detail and error_detail.get("issue") == "INSTRUMENT_DECLINED" and not card:
        return RecoverableDecline()

    if error_detail or transaction is None or transaction.status == "DECLINED":
        if transaction is not None:
            reason = f"Transaction {transaction.status}: {transaction.id}"
        elif error_detail:
            reason = f"{error_detail.get('description')} ({order_data.get('debug_id')})"
        else:
            reason = json.dumps(order_data)
        declined = (transaction is not None and transaction.status == "DECLINED") or (
            error_detail is not None
            and error_detail.get("issue") == "INSTRUMENT_DECLINED"
        )
        return Failure(reason=reason, declined=declined)

    return Success(transaction)


class CheckoutClient:
    def __init__(self, base_url: str = "", session: requests.Session | None = None):
        """
        Args:
            base_url: Where the proxy is served, e.g. http://localhost:8080
            session: Anything with a requests-style ``post``; a new
                ``requests.Session`` when omitted
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    def _post(self, path: str, body: dict[str, Any] | None = None):
        return self.session.post(
            f"{self.base_url}{path}", json=body, headers=JSON_HEADERS
        )

    def create_order(self, cart: list[dict[str, Any]] | None = None) -> str:
        """Create an order through the proxy and return its PayPal id."""
        try:
            response = self._post(
                "/api/orders", {"cart": DEFAULT_CART if cart is None else cart}
            )
            order_data = response.json()
        except (requests.RequestException, ValueError) as e:
            log.error("checkout.create_order_failed", error=str(e))
            raise CheckoutError(f"Could not initiate PayPal Checkout... {e}") from e

        if isinstance(order_data, dict) and order_data.get("id"):
            return order_data["id"]

        message = (
            describe_error(order_data)
            if isinstance(order_data, dict)
            else json.dumps(order_data)
        )
        log.error("checkout.create_order_failed", error=message)
        raise CheckoutError(f"Could not initiate PayPal Checkout... {message}")

    def approve(self, order_id: str, card: bool = False) -> Outcome:
        """Capture an approved order and classify the result."""
        try:
            response = self._post(f"/api/orders/{quote(order_id, safe='')}/capture")
            order_data = response.json()
        except (requests.RequestException, ValueError) as e:
            log.error("checkout.capture_failed", order_id=order_id, error=str(e))
            return Failure(reason=str(e))

        if not isinstance(order_data, dict):
            return Failure(reason=json.dumps(order_data))

        outcome = classify_capture(order_data, card=card)
        log.info(
            "checkout.capture_result",
            order_id=order_id,
            outcome=type(outcome).__name__,
            status_code=response.status_code,
        )
        return outcome

    def refund(self, captured_payment_id: str) -> RefundResult:
        try:
            response = self._post(
                "/api/payments/refund", {"capturedPaymentId": captured_payment_id}
            )
            result = response.json()
        except (requests.RequestException, ValueError) as e:
            log.error(
                "checkout.refund_failed", capture_id=captured_payment_id, error=str(e)
            )
            return RefundResult(
                ok=False, message="An error occurred while processing the refund."
            )

        body = result if isinstance(result, dict) else {}
        if 200 <= response.status_code < 300:
            return RefundResult(ok=True, message="Refund successful!", body=body)
        return RefundResult(
            ok=False, message=f"Refund failed: {body.get('error')}", body=body
        )
