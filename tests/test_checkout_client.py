"""
Checkout client tests: how proxy responses are turned into outcomes.
"""

from unittest.mock import MagicMock

import pytest
import requests

from checkout.client import CheckoutClient, classify_capture, find_transaction
from checkout.outcomes import (
    CheckoutError,
    Failure,
    RecoverableDecline,
    Success,
    Transaction,
)
from conftest import MockResponse, api_error
from payments.paypal_client import ApiResult


def captured(status="COMPLETED", capture_id="3C679366HH908993F"):
    return {
        "id": "ORDER-1",
        "status": "COMPLETED",
        "purchase_units": [
            {"payments": {"captures": [{"id": capture_id, "status": status}]}}
        ],
    }


def declined_detail(issue="INSTRUMENT_DECLINED"):
    return {
        "name": "UNPROCESSABLE_ENTITY",
        "debug_id": "dbg-42",
        "details": [{"issue": issue, "description": "The instrument was declined."}],
    }


def session_returning(*responses):
    session = MagicMock()
    session.post.side_effect = list(responses)
    return session


class TestClassifyCapture:
    def test_completed_capture_is_success(self):
        outcome = classify_capture(captured())

        assert isinstance(outcome, Success)
        assert outcome.transaction == Transaction("3C679366HH908993F", "COMPLETED")
        assert outcome.message == "Transaction COMPLETED: 3C679366HH908993F"

    def test_pending_capture_is_success(self):
        outcome = classify_capture(captured(status="PENDING"))

        assert isinstance(outcome, Success)
        assert "PENDING" in outcome.message

    def test_authorization_is_used_when_no_capture(self):
        order = {
            "purchase_units": [
                {
                    "payments": {
                        "authorizations": [{"id": "AUTH-1", "status": "CREATED"}]
                    }
                }
            ]
        }

        outcome = classify_capture(order)

        assert isinstance(outcome, Success)
        assert outcome.message == "Transaction CREATED: AUTH-1"

    def test_instrument_declined_outside_card_flow_is_recoverable(self):
        assert isinstance(classify_capture(declined_detail()), RecoverableDecline)

    def test_instrument_declined_in_card_flow_is_final(self):
        outcome = classify_capture(declined_detail(), card=True)

        assert isinstance(outcome, Failure)
        assert outcome.declined is True
        assert outcome.reason == "The instrument was declined. (dbg-42)"

    def test_declined_status_is_final(self):
        outcome = classify_capture(captured(status="DECLINED"))

        assert outcome == Failure(
            reason="Transaction DECLINED: 3C679366HH908993F", declined=True
        )

    def test_other_error_detail_is_failure(self):
        outcome = classify_capture(declined_detail("ORDER_NOT_APPROVED"))

        assert isinstance(outcome, Failure)
        assert outcome.declined is False
        assert "(dbg-42)" in outcome.reason

    def test_missing_transaction_is_failure_with_body(self):
        outcome = classify_capture({"error": "Failed to capture order."})

        assert isinstance(outcome, Failure)
        assert outcome.reason == '{"error": "Failed to capture order."}'
        assert "could not be processed" in outcome.message

    def test_find_transaction_handles_empty_units(self):
        assert find_transaction({"purchase_units": []}) is None
        assert find_transaction({"purchase_units": [{}]}) is None

    def test_find_transaction_tolerates_partial_record(self):
        order = {"purchase_units": [{"payments": {"captures": [{"amount": {}}]}}]}

        transaction = find_transaction(order)

        assert transaction == Transaction(None, None)
        assert transaction.raw == {"amount": {}}


class TestCreateOrder:
    def test_returns_order_id(self):
        session = session_returning(MockResponse(201, {"id": "ORDER-1"}))

        order_id = CheckoutClient("http://proxy", session).create_order()

        assert order_id == "ORDER-1"
        call = session.post.call_args
        assert call.args[0] == "http://proxy/api/orders"
        assert call.kwargs["json"] == {
            "cart": [{"id": "YOUR_PRODUCT_ID", "quantity": "YOUR_PRODUCT_QUANTITY"}]
        }

    def test_missing_id_raises_with_detail(self):
        session = session_returning(
            MockResponse(422, declined_detail("INVALID_CURRENCY"))
        )

        with pytest.raises(CheckoutError) as exc_info:
            CheckoutClient("", session).create_order()

        message = str(exc_info.value)
        assert "INVALID_CURRENCY" in message
        assert "The instrument was declined." in message
        assert "(dbg-42)" in message

    def test_missing_id_without_detail_raises_with_body(self):
        session = session_returning(
            MockResponse(500, {"error": "Failed to create order."})
        )

        with pytest.raises(CheckoutError, match="Failed to create order."):
            CheckoutClient("", session).create_order()

    def test_transport_error_raises(self):
        session = session_returning(requests.ConnectionError("proxy down"))

        with pytest.raises(CheckoutError, match="Could not initiate PayPal Checkout"):
            CheckoutClient("", session).create_order()


class TestApprove:
    def test_posts_to_capture_endpoint(self):
        session = session_returning(MockResponse(201, captured()))

        outcome = CheckoutClient("http://proxy", session).approve("ORDER-1")

        assert isinstance(outcome, Success)
        url = session.post.call_args.args[0]
        assert url == "http://proxy/api/orders/ORDER-1/capture"

    def test_transport_error_is_failure(self):
        session = session_returning(requests.Timeout("read timed out"))

        outcome = CheckoutClient("", session).approve("ORDER-1")

        assert isinstance(outcome, Failure)
        assert "read timed out" in outcome.reason


class TestRefund:
    def test_success(self):
        session = session_returning(
            MockResponse(201, {"id": "REF-1", "status": "COMPLETED"})
        )

        result = CheckoutClient("", session).refund("CAP-1")

        assert result.ok is True
        assert result.message == "Refund successful!"
        assert session.post.call_args.kwargs["json"] == {"capturedPaymentId": "CAP-1"}

    def test_failure_shows_error_field(self):
        session = session_returning(
            MockResponse(500, {"error": "Failed refund captured payment."})
        )

        result = CheckoutClient("", session).refund("CAP-1")

        assert result.ok is False
        assert result.message == "Refund failed: Failed refund captured payment."

    def test_transport_error(self):
        session = session_returning(requests.ConnectionError("proxy down"))

        result = CheckoutClient("", session).refund("CAP-1")

        assert result.ok is False
        assert result.message == "An error occurred while processing the refund."


class TestAgainstProxy:
    """The checkout client driving the real routes, PayPal faked underneath."""

    def test_create_and_capture(self, client, paypal):
        paypal.respond(
            "create_order", ApiResult(201, {"id": "ORDER-1", "status": "CREATED"})
        )
        paypal.respond("capture_order", ApiResult(201, captured()))
        checkout = CheckoutClient(session=client)

        order_id = checkout.create_order()
        outcome = checkout.approve(order_id)

        assert order_id == "ORDER-1"
        assert isinstance(outcome, Success)
        assert outcome.transaction.id == "3C679366HH908993F"

    def test_upstream_decline_is_failure_in_strict_mode(self, client, paypal):
        # The proxy hides the decline detail behind its fixed 500 message
        paypal.respond("capture_order", api_error(422, "INSTRUMENT_DECLINED"))

        outcome = CheckoutClient(session=client).approve("ORDER-1")

        assert outcome == Failure(reason='{"error": "Failed to capture order."}')

    def test_upstream_decline_is_recoverable_when_forwarded(
        self, forwarding_client, paypal
    ):
        paypal.respond("capture_order", api_error(422, "INSTRUMENT_DECLINED"))

        outcome = CheckoutClient(session=forwarding_client).approve("ORDER-1")

        assert isinstance(outcome, RecoverableDecline)

    def test_refund_failure(self, client, paypal):
        paypal.respond("refund_capture", api_error(422, "CAPTURE_FULLY_REFUNDED"))

        result = CheckoutClient(session=client).refund("CAP-1")

        assert result.ok is False
        assert result.message == "Refund failed: Failed refund captured payment."
