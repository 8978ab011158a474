"""
Prometheus metrics instrumentation for the checkout proxy.

This module sets up FastAPI instrumentation to expose metrics in Prometheus format
at the /metrics endpoint with optional authentication.
"""

import os

from fastapi import Request, status
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Histogram
from prometheus_fastapi_instrumentator import Instrumentator

# Upstream PayPal calls, labelled by operation (create_order, refund_capture, ...)
paypal_requests_total = Counter(
    "checkout_paypal_requests_total",
    "Total number of PayPal API calls made by the proxy",
    ["operation", "outcome"],  # outcome: success, api_error, transport_error
)

paypal_request_latency = Histogram(
    "checkout_paypal_request_latency_seconds",
    "Time taken for a PayPal API call to complete",
    ["operation"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)


def init_metrics(app):
    """
    Initialize Prometheus metrics instrumentation for the FastAPI app.

    Args:
        app: FastAPI application instance

    Returns:
        Instrumentator instance
    """
    inst = Instrumentator(
        should_group_status_codes=False,
        should_ignore_untemplated=True,
        excluded_handlers=["/metrics"],
    )

    inst.instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)
    return inst


def add_metrics_auth_middleware(app):
    """
    Add middleware to protect the /metrics endpoint outside development.
    For production use, set METRICS_AUTH_TOKEN environment variable.
    """

    @app.middleware("http")
    async def metrics_auth_middleware(request: Request, call_next):
        if request.url.path != "/metrics":
            return await call_next(request)

        if os.getenv("ENVIRONMENT", "development") == "development":
            return await call_next(request)

        auth_header = request.headers.get("X-Metrics-Auth")
        expected_token = os.getenv("METRICS_AUTH_TOKEN")
        if expected_token and auth_header == expected_token:
            return await call_next(request)

        # Allow internal network access (VPN/private networks)
        client_ip = request.client.host if request.client else None
        if client_ip and client_ip.startswith(("10.", "192.168.", "172.")):
            return await call_next(request)

        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": "Metrics endpoint access denied"},
        )


def metrics_enabled() -> bool:
    """Read METRICS_ENABLED from the environment. On unless explicitly false."""
    return os.getenv("METRICS_ENABLED", "true").lower() not in {"0", "false", "no"}


def setup_metrics(app):
    """Instrument the app and guard /metrics, unless METRICS_ENABLED is off."""
    if not metrics_enabled():
        return None

    inst = init_metrics(app)
    add_metrics_auth_middleware(app)
    return inst
