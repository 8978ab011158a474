"""Test configuration and fixtures."""

import os

import pytest
import structlog
from fastapi.testclient import TestClient

from core.dependencies import get_paypal_client, get_settings
from core.settings import Settings
from main import app
from payments.paypal_client import ApiResult, PayPalApiError

# Module-level loggers must not pin their config, or capture_logs() misses them
structlog.configure(cache_logger_on_first_use=False)


class MockResponse:
    """Stand-in for requests.Response with just what the clients read."""

    def __init__(self, status_code, json_data=None, text="", headers=None):
        self.status_code = status_code
        self._json_data = json_data
        self.text = text
        self.headers = headers or {}

    @property
    def content(self):
        if self._json_data is not None:
            return b"{...}"
        return self.text.encode()

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._json_data is None:
            raise ValueError("No JSON object could be decoded")
        return self._json_data


class FakePayPalClient:
    """
    In-memory PayPalClient. Each operation returns (or raises) whatever was
    queued for it in ``responses`` and records the arguments it was called with.
    """

    OPERATIONS = (
        "create_order",
        "capture_order",
        "authorize_order",
        "capture_authorization",
        "refund_capture",
    )

    def __init__(self):
        self.responses = {}
        self.calls = []

    def respond(self, operation, response):
        assert operation in self.OPERATIONS, operation
        self.responses[operation] = response

    def _handle(self, operation, *args):
        self.calls.append((operation, args))
        response = self.responses.get(operation, ApiResult(200, {}))
        if isinstance(response, Exception):
            raise response
        return response

    def create_order(self, payload):
        return self._handle("create_order", payload)

    def capture_order(self, order_id):
        return self._handle("capture_order", order_id)

    def authorize_order(self, order_id):
        return self._handle("authorize_order", order_id)

    def capture_authorization(self, authorization_id, final_capture=False):
        return self._handle("capture_authorization", authorization_id, final_capture)

    def refund_capture(self, capture_id):
        return self._handle("refund_capture", capture_id)

    def close(self):
        pass


def api_error(status_code=422, issue="INSTRUMENT_DECLINED", debug_id="dbg-123"):
    """A PayPal rejection shaped like the real thing."""
    return PayPalApiError(
        status_code,
        {
            "name": "UNPROCESSABLE_ENTITY",
            "message": "The requested action could not be performed.",
            "debug_id": debug_id,
            "details": [
                {
                    "issue": issue,
                    "description": "The instrument presented was declined.",
                }
            ],
        },
        debug_id,
    )


@pytest.fixture(autouse=True)
def setup_test_environment():
    """Setup test environment variables before each test."""
    original_env = dict(os.environ)

    os.environ.update(
        {
            "PAYPAL_CLIENT_ID": "test_client_id",
            "PAYPAL_CLIENT_SECRET": "test_client_secret",
            "PAYPAL_ENVIRONMENT": "sandbox",
            "APP_NAME": "Test Checkout",
            "ENVIRONMENT": "development",
            "DISABLE_TRACING": "true",
            "DEBUG": "true",
        }
    )

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def mock_settings():
    return Settings(
        PAYPAL_CLIENT_ID="test_client_id",
        PAYPAL_CLIENT_SECRET="test_client_secret",
        APP_NAME="Test Checkout",
        DEBUG=True,
        ENVIRONMENT="development",
    )


@pytest.fixture
def paypal():
    return FakePayPalClient()


@pytest.fixture
def client(paypal):
    """Test client with the PayPal client swapped for the in-memory fake."""
    app.dependency_overrides[get_paypal_client] = lambda: paypal

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def forwarding_client(paypal, mock_settings):
    """Test client that relays upstream error payloads instead of the fixed 500."""
    settings = mock_settings.model_copy(update={"FORWARD_PROCESSOR_ERRORS": True})
    app.dependency_overrides[get_paypal_client] = lambda: paypal
    app.dependency_overrides[get_settings] = lambda: settings

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()

