"""
PayPal REST Client

Thin wrapper over the PayPal Orders v2 and Payments v2 APIs. Every call
returns an ApiResult carrying the upstream status code and parsed body; any
non-2xx response is raised as PayPalApiError.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any
from urllib.parse import quote

import requests
import structlog

from core.logging import BusinessEvents
from core.settings import Settings

log = structlog.get_logger(__name__)

# Refresh the access token this long before PayPal says it expires
TOKEN_EXPIRY_MARGIN = timedelta(minutes=1)


class PayPalError(Exception):
    """Raised when PayPal cannot be reached or answers with garbage."""


class PayPalApiError(PayPalError):
    """Raised when PayPal rejects a request with a non-2xx status."""

    def __init__(self, status_code: int, body: dict[str, Any], debug_id: str | None):
        self.status_code = status_code
        self.body = body
        self.debug_id = debug_id
        self.message = body.get("message") or body.get("name") or f"HTTP {status_code}"
        super().__init__(self.message)

    @property
    def issue(self) -> str | None:
        details = self.body.get("details") or []
        return details[0].get("issue") if details else None


@dataclass
class ApiResult:
    status_code: int
    body: dict[str, Any] = field(default_factory=dict)


class PayPalClient:
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        base_url: str,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.base = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self._token_cache: tuple[str, datetime] | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "PayPalClient":
        return cls(
            client_id=settings.PAYPAL_CLIENT_ID,
            client_secret=settings.PAYPAL_CLIENT_SECRET,
            base_url=settings.paypal_base_url,
            timeout=settings.PAYPAL_TIMEOUT,
        )

    def close(self) -> None:
        self.session.close()

    def _token(self) -> str:
        if self._token_cache and self._token_cache[1] > datetime.now(UTC):
            return self._token_cache[0]

        try:
            r = self.session.post(
                f"{self.base}/v1/oauth2/token",
                auth=(self.client_id, self.client_secret),
                data={"grant_type": "client_credentials"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise PayPalError(f"Token request failed: {e}") from e

        if r.status_code >= 400:
            raise PayPalApiError(r.status_code, _parse_body(r), _debug_id(r, {}))

        data = _parse_body(r)
        token = data.get("access_token")
        if not token:
            raise PayPalError("PayPal token response had no access_token")

        expires_in = timedelta(seconds=int(data.get("expires_in", 300)))
        self._token_cache = (
            token,
            datetime.now(UTC) + max(expires_in - TOKEN_EXPIRY_MARGIN, timedelta(0)),
        )
        log.debug(
            BusinessEvents.TOKEN_REFRESHED,
            expires_in=int(expires_in.total_seconds()),
        )
        return token

    def _post(self, path: str, body: dict[str, Any] | None = None) -> ApiResult:
        headers = {
            "Authorization": f"Bearer {self._token()}",
            "Content-Type": "application/json",
            "Prefer": "return=minimal",
        }
        try:
            r = self.session.post(
                f"{self.base}{path}", json=body, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise PayPalError(f"PayPal request to {path} failed: {e}") from e

        parsed = _parse_body(r)
        if r.status_code >= 400:
            raise PayPalApiError(r.status_code, parsed, _debug_id(r, parsed))
        return ApiResult(status_code=r.status_code, body=parsed)

    def create_order(self, payload: dict[str, Any]) -> ApiResult:
        """
        Create an order to start the transaction.
        https://developer.paypal.com/docs/api/orders/v2/#orders_create
        """
        return self._post("/v2/checkout/orders", payload)

    def capture_order(self, order_id: str) -> ApiResult:
        """
        Capture payment for an approved order.
        https://developer.paypal.com/docs/api/orders/v2/#orders_capture
        """
        return self._post(f"/v2/checkout/orders/{quote(order_id, safe='')}/capture")

    def authorize_order(self, order_id: str) -> ApiResult:
        """
        Authorize payment for an approved order.
        https://developer.paypal.com/docs/api/orders/v2/#orders_authorize
        """
        return self._post(f"/v2/checkout/orders/{quote(order_id, safe='')}/authorize")

    def capture_authorization(
        self, authorization_id: str, final_capture: bool = False
    ) -> ApiResult:
        """
        Capture a previously authorized payment.
        https://developer.paypal.com/docs/api/payments/v2/#authorizations_capture
        """
        return self._post(
            f"/v2/payments/authorizations/{quote(authorization_id, safe='')}/capture",
            {"final_capture": final_capture},
        )

    def refund_capture(self, capture_id: str) -> ApiResult:
        """
        Refund a captured payment in full.
        https://developer.paypal.com/docs/api/payments/v2/#captures_refund
        """
        return self._post(f"/v2/payments/captures/{quote(capture_id, safe='')}/refund")


def _parse_body(response: requests.Response) -> dict[str, Any]:
    if not response.content:
        return {}
    try:
        parsed = response.json()
    except ValueError as e:
        raise PayPalError(
            f"PayPal returned a non-JSON body (HTTP {response.status_code})"
        ) from e
    if not isinstance(parsed, dict):
        raise PayPalError(f"Unexpected PayPal response shape: {type(parsed).__name__}")
    return parsed


def _debug_id(response: requests.Response, body: dict[str, Any]) -> str | None:
    return body.get("debug_id") or response.headers.get("PayPal-Debug-Id")
