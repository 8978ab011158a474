from fastapi import Depends, Request

from core.settings import Settings
from payments.paypal_client import PayPalClient
from payments.paypal_service import PaymentService

# Settings singleton
_settings = None


def get_settings() -> Settings:
    """Dependency that provides application settings."""
    assert (
        _settings is not None
    ), "Settings not initialized. Make sure startup() was called."
    return _settings


def init_settings():
    """Initialize settings singleton."""
    global _settings
    _settings = Settings()


def clear_settings():
    """Clear settings singleton."""
    global _settings
    _settings = None


def get_paypal_client(request: Request) -> PayPalClient:
    """Dependency that provides the PayPal client owned by the app lifespan."""
    client = getattr(request.app.state, "paypal_client", None)
    assert client is not None, "PayPal client not initialized. Is the lifespan running?"
    return client


def get_payment_service(
    client: PayPalClient = Depends(get_paypal_client),
) -> PaymentService:
    return PaymentService(client)
