"""
Configuration module for the Redsys payment gateway service.

Loads settings from environment variables with sensible defaults.
"""

import os
from dataclasses import dataclass
from typing import List, Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

SANDBOX_GATEWAY_URL = "https://sis-t.redsys.es:25443/sis/realizarPago"
PRODUCTION_GATEWAY_URL = "https://sis.redsys.es/sis/realizarPago"


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class RedsysConfig:
    """Merchant account at the gateway."""
    merchant_code: str
    merchant_terminal: str
    secret_key: str  # base64, as issued by the bank
    sandbox: bool = True

    @property
    def gateway_url(self) -> str:
        """Endpoint the payment form posts to."""
        return SANDBOX_GATEWAY_URL if self.sandbox else PRODUCTION_GATEWAY_URL


@dataclass
class URLConfig:
    """Callback and return URLs sent with every request."""
    merchant_url: str
    url_ok: str  # may contain {order_id}
    url_ko: str  # may contain {order_id}


@dataclass
class APIConfig:
    """API server configuration."""
    host: str
    port: int


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str
    file: Optional[str]


@dataclass
class ServiceConfig:
    """Service-level configuration."""
    name: str


class Config:
    """
    Main configuration class that aggregates all config sections.

    Usage:
        from config import config

        print(config.redsys.merchant_code)
        print(config.redsys.gateway_url)
    """

    def __init__(self):
        self._load_config()

    def _load_config(self):
        """Load all configuration from environment variables."""

        # Merchant account
        self.redsys = RedsysConfig(
            merchant_code=os.getenv('REDSYS_MERCHANT_CODE', ''),
            merchant_terminal=os.getenv('REDSYS_MERCHANT_TERMINAL', '1'),
            secret_key=os.getenv('REDSYS_SECRET_KEY', ''),
            sandbox=_env_bool('REDSYS_SANDBOX', 'true')
        )

        # Callback URLs
        self.urls = URLConfig(
            merchant_url=os.getenv('REDSYS_MERCHANT_URL', 'http://localhost:8000/redsys/notification'),
            url_ok=os.getenv('REDSYS_URL_OK', 'http://localhost:8000/payment/{order_id}/ok'),
            url_ko=os.getenv('REDSYS_URL_KO', 'http://localhost:8000/payment/{order_id}/ko')
        )

        # API configuration
        self.api = APIConfig(
            host=os.getenv('API_HOST', '0.0.0.0'),
            port=int(os.getenv('API_PORT', '8000'))
        )

        # Logging configuration
        self.logging = LoggingConfig(
            level=os.getenv('LOG_LEVEL', 'INFO'),
            file=os.getenv('LOG_FILE')
        )

        # Service configuration
        self.service = ServiceConfig(
            name=os.getenv('SERVICE_NAME', 'RedsysPaymentGateway')
        )

    def validate(self) -> List[str]:
        """
        Validate required configuration values.

        Returns:
            List of validation error messages (empty if all valid)
        """
        errors = []

        if not self.redsys.merchant_code:
            errors.append("REDSYS_MERCHANT_CODE is required")

        if not self.redsys.secret_key:
            errors.append("REDSYS_SECRET_KEY is required")

        if not self.urls.merchant_url:
            errors.append("REDSYS_MERCHANT_URL is required")

        return errors

    def is_valid(self) -> bool:
        """Check if configuration is valid."""
        return len(self.validate()) == 0


# Global configuration instance
config = Config()
