"""
Configuration Module for the Kiosk API
======================================

This module centralizes all configuration settings, environment variables, and
constants used throughout the kiosk backend. By consolidating configuration in
one place, we achieve:

1. **Single Source of Truth**: All environment variables and defaults are defined
   here, making it easy to see what configuration options exist.

2. **Easy Environment Management**: Different environments (dev, staging, prod)
   can override settings via environment variables without code changes.

3. **Typed Integration Settings**: Each third-party integration (Stripe, Square,
   Resend) gets a small frozen dataclass built from these values, so services
   receive an explicit configuration object instead of reading the environment.

Configuration Categories:
-------------------------
- **Restaurant**: Display name printed on receipts and emails, order number prefix.

- **Pricing**: Default kiosk fee and tax rate. The kiosk fee can be overridden
  at runtime by the ``kiosk_fee`` setting stored in the database.

- **Payments**: Which processor is active and its credentials.

- **Notifications**: Resend API key and the restaurant inbox for order emails.

- **Admin**: Shared secret required in the ``X-Admin-Password`` header.

Environment Variables:
----------------------
- DATABASE_URL: SQLAlchemy URL (optional; without it orders are not persisted)
- ADMIN_PASSWORD: Admin API secret (required for admin access)
- CORS_ORIGINS: Comma-separated allowed origins (default: "*")
- PAYMENT_PROVIDER: "stripe" or "square" (default: "stripe")
- STRIPE_SECRET_KEY, STRIPE_WEBHOOK_SECRET
- SQUARE_APPLICATION_ID, SQUARE_APPLICATION_SECRET, SQUARE_ACCESS_TOKEN,
  SQUARE_LOCATION_ID, SQUARE_ENVIRONMENT, SQUARE_REDIRECT_URL
- ADMIN_UI_URL: Where the Square OAuth callback sends the browser afterwards
- RESEND_API_KEY, RESTAURANT_EMAIL, ORDER_EMAIL_FROM
- RESTAURANT_NAME, ORDER_NUMBER_PREFIX, DEFAULT_KIOSK_FEE, TAX_RATE

Usage:
------
    from kiosk_api import config

    fee = config.DEFAULT_KIOSK_FEE
    stripe_config = config.get_stripe_config()
"""

import os
from dataclasses import dataclass
from typing import List, Optional


# =============================================================================
# Restaurant Configuration
# =============================================================================

RESTAURANT_NAME: str = os.getenv("RESTAURANT_NAME", "Walter's Kitchen")

# Order numbers are PREFIX + last 8 digits of the creation time in ms
ORDER_NUMBER_PREFIX: str = os.getenv("ORDER_NUMBER_PREFIX", "WK")


# =============================================================================
# Pricing Configuration
# =============================================================================
# The kiosk fee is a flat surcharge added to every order. Tax is charged on the
# subtotal plus the kiosk fee.

DEFAULT_KIOSK_FEE: float = float(os.getenv("DEFAULT_KIOSK_FEE", "3.00"))
TAX_RATE: float = float(os.getenv("TAX_RATE", "0.0825"))
DEFAULT_CURRENCY: str = os.getenv("DEFAULT_CURRENCY", "usd")


# =============================================================================
# CORS Configuration
# =============================================================================

_cors_origins_env = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS: List[str] = [
    origin.strip()
    for origin in _cors_origins_env.split(",")
    if origin.strip()
] or ["*"]


# =============================================================================
# Admin Authentication Configuration
# =============================================================================
# ADMIN_PASSWORD must be set for admin endpoints to be reachable at all.

ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "")
ADMIN_HEADER_NAME: str = "X-Admin-Password"

# Square sends the browser back to the API; the API then forwards it here
ADMIN_UI_URL: str = os.getenv("ADMIN_UI_URL", "/admin")


# =============================================================================
# Payment Configuration
# =============================================================================

PAYMENT_PROVIDER: str = os.getenv("PAYMENT_PROVIDER", "stripe").lower()

STRIPE_SECRET_KEY: str = os.getenv("STRIPE_SECRET_KEY", "")
STRIPE_WEBHOOK_SECRET: str = os.getenv("STRIPE_WEBHOOK_SECRET", "")

SQUARE_APPLICATION_ID: str = os.getenv("SQUARE_APPLICATION_ID", "")
SQUARE_APPLICATION_SECRET: str = os.getenv("SQUARE_APPLICATION_SECRET", "")
SQUARE_ACCESS_TOKEN: str = os.getenv("SQUARE_ACCESS_TOKEN", "")
SQUARE_LOCATION_ID: str = os.getenv("SQUARE_LOCATION_ID", "")
SQUARE_ENVIRONMENT: str = os.getenv("SQUARE_ENVIRONMENT", "sandbox").lower()
SQUARE_REDIRECT_URL: str = os.getenv("SQUARE_REDIRECT_URL", "")


# =============================================================================
# Notification Configuration
# =============================================================================

RESEND_API_KEY: str = os.getenv("RESEND_API_KEY", "")
RESTAURANT_EMAIL: str = os.getenv("RESTAURANT_EMAIL", "")
ORDER_EMAIL_FROM: str = os.getenv("ORDER_EMAIL_FROM", "orders@walters-kitchen.local")


# =============================================================================
# Typed Integration Settings
# =============================================================================

@dataclass(frozen=True)
class StripeConfig:
    """Credentials for the hosted-intent (Stripe) payment adapter."""
    secret_key: str
    webhook_secret: Optional[str] = None
    currency: str = "usd"


@dataclass(frozen=True)
class SquareConfig:
    """Credentials for the server-relay (Square) payment adapter."""
    application_id: str
    application_secret: str
    access_token: str
    location_id: str
    environment: str = "sandbox"
    redirect_url: Optional[str] = None
    currency: str = "USD"

    @property
    def base_url(self) -> str:
        if self.environment == "production":
            return "https://connect.squareup.com"
        return "https://connect.squareupsandbox.com"


@dataclass(frozen=True)
class EmailConfig:
    """Resend settings for the new-order notification email."""
    api_key: str
    recipient: str
    sender: str
    restaurant_name: str

    @property
    def enabled(self) -> bool:
        return bool(self.api_key and self.recipient)


def get_stripe_config() -> StripeConfig:
    return StripeConfig(
        secret_key=STRIPE_SECRET_KEY,
        webhook_secret=STRIPE_WEBHOOK_SECRET or None,
        currency=DEFAULT_CURRENCY.lower(),
    )


def get_square_config() -> SquareConfig:
    return SquareConfig(
        application_id=SQUARE_APPLICATION_ID,
        application_secret=SQUARE_APPLICATION_SECRET,
        access_token=SQUARE_ACCESS_TOKEN,
        location_id=SQUARE_LOCATION_ID,
        environment=SQUARE_ENVIRONMENT,
        redirect_url=SQUARE_REDIRECT_URL or None,
        currency=DEFAULT_CURRENCY.upper(),
    )


def get_email_config() -> EmailConfig:
    return EmailConfig(
        api_key=RESEND_API_KEY,
        recipient=RESTAURANT_EMAIL,
        sender=ORDER_EMAIL_FROM,
        restaurant_name=RESTAURANT_NAME,
    )
