"""
Checkout Proxy - Main Application Entry Point

This module initializes the FastAPI application that proxies checkout actions
from the browser to the PayPal REST API, and serves the checkout page itself.
"""

from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from api import routes
from api.middleware import log_api_entry
from core.dependencies import clear_settings, get_settings, init_settings
from core.logging import configure_logging
from core.metrics import setup_metrics
from core.settings import Settings
from core.tracing import init_tracer
from payments.paypal_client import PayPalClient

log = structlog.get_logger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI application startup and shutdown events."""
    # Startup
    init_settings()
    settings = get_settings()

    init_tracer(settings.OTEL_SERVICE_NAME)

    # One PayPal client for the whole process, handed to routes via Depends
    app.state.paypal_client = PayPalClient.from_settings(settings)
    log.info(
        "app.started",
        paypal_environment=settings.PAYPAL_ENVIRONMENT,
        paypal_base=settings.paypal_base_url,
    )

    yield
    # Shutdown
    app.state.paypal_client.close()
    app.state.paypal_client = None
    clear_settings()


app = FastAPI(
    title="Checkout Proxy",
    description="""
    ## PayPal Checkout Proxy

    Forwards checkout actions from the browser to the PayPal REST API and relays
    the responses unchanged.

    ### Endpoints:
    - `POST /api/orders` - create an order
    - `POST /api/orders/{orderID}/capture` - capture an approved order
    - `POST /api/orders/{orderID}/authorize` - authorize an approved order
    - `POST /orders/{authorizationId}/captureAuthorize` - capture an authorization
    - `POST /api/payments/refund` - refund a captured payment
    - `GET /checkout` - checkout page
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# Initialize FastAPI instrumentation
FastAPIInstrumentor.instrument_app(app)

# Prometheus metrics and the /metrics auth guard (skipped when METRICS_ENABLED=false)
setup_metrics(app)

app.middleware("http")(log_api_entry)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc)},
    )


@app.get("/health")
async def health(settings: Settings = Depends(get_settings)):
    """Health check endpoint alias."""
    return await health_check(settings)


@app.get("/healthz")
async def health_check(settings: Settings = Depends(get_settings)):
    """Health check endpoint to verify API status."""
    return {
        "status": "ok",
        "app_name": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
        "paypal_environment": settings.PAYPAL_ENVIRONMENT,
    }


app.include_router(routes.router)

# Browser script and styles for the checkout page
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


def main():
    import uvicorn

    settings = Settings()
    configure_logging(settings.ENVIRONMENT)
    log.info("app.listening", url=f"http://localhost:{settings.PORT}/checkout")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
