import logging
import os

import structlog
from opentelemetry.instrumentation.logging import LoggingInstrumentor


def configure_logging(environment: str | None = None):
    """
    Set up structlog over stdlib logging, with OTEL trace ids injected.

    JSON lines outside development so log shippers can parse PayPal debug ids;
    colored console output when running locally. LOG_LEVEL sets the root level.
    """
    env = environment or os.getenv("ENVIRONMENT", "development")
    renderer = (
        structlog.dev.ConsoleRenderer(colors=True, sort_keys=False)
        if env == "development"
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())

    # Requests are logged by log_api_entry, and urllib3 logs every PayPal
    # connection at DEBUG
    logging.getLogger("uvicorn.access").handlers.clear()
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    LoggingInstrumentor().instrument(set_logging_format=False)


class BusinessEvents:
    """Event names for the checkout proxy's structured logs."""

    API_ENTRY = "api.request"
    ORDER_REQUESTED = "order.requested"
    PAYMENT_ATTEMPT = "payment.attempt"
    PAYMENT_SUCCESS = "payment.success"
    PAYMENT_FAILURE = "payment.failure"
    PROXY_FAILURE = "proxy.failure"
    TOKEN_REFRESHED = "paypal.token_refreshed"


configure_logging()
