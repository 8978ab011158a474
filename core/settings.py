from typing import Literal

from dotenv import load_dotenv
from pydantic import ConfigDict
from pydantic_settings import BaseSettings

# Load .env file automatically
load_dotenv()

PAYPAL_BASE_URLS = {
    "sandbox": "https://api-m.sandbox.paypal.com",
    "live": "https://api-m.paypal.com",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # PayPal credentials
    PAYPAL_CLIENT_ID: str
    PAYPAL_CLIENT_SECRET: str
    PAYPAL_ENVIRONMENT: Literal["sandbox", "live"] = "sandbox"
    PAYPAL_BASE: str | None = None  # Overrides the environment's base URL
    PAYPAL_TIMEOUT: float | None = None  # None waits indefinitely

    # Relay upstream error payloads instead of the fixed 500 message
    FORWARD_PROCESSOR_ERRORS: bool = False

    # App settings
    APP_NAME: str = "Checkout Proxy"
    DEBUG: bool = False
    ENVIRONMENT: Literal["development", "production", "test"] = "development"
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # Observability (Optional)
    OTEL_SERVICE_NAME: str = "checkout-proxy"
    METRICS_ENABLED: bool = True

    model_config = ConfigDict(env_file=".env", case_sensitive=True)

    @property
    def paypal_base_url(self) -> str:
        return (self.PAYPAL_BASE or PAYPAL_BASE_URLS[self.PAYPAL_ENVIRONMENT]).rstrip(
            "/"
        )
