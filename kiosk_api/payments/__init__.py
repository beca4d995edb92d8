"""
Payments Package for the Kiosk API
==================================

Card payments go through one of two interchangeable adapters, selected by the
PAYMENT_PROVIDER environment variable:

- **stripe** (``StripePaymentAdapter``): server creates a PaymentIntent, the
  browser confirms it with Stripe.js.
- **square** (``SquarePaymentAdapter``): the browser tokenizes the card, the
  server creates the payment.

Usage:
------
    from kiosk_api.payments import get_payment_adapter

    adapter = get_payment_adapter()          # from PAYMENT_PROVIDER
    adapter = get_payment_adapter("square")  # explicit
"""

import logging
from typing import Optional, Union

from .. import config
from .base import (
    ChargeHandle,
    ChargeResult,
    FeeSplit,
    PaymentAdapter,
    PaymentError,
    PaymentProvider,
)
from .square_adapter import SquarePaymentAdapter
from .stripe_adapter import StripePaymentAdapter

logger = logging.getLogger(__name__)


def resolve_provider(provider: Optional[Union[str, PaymentProvider]] = None) -> PaymentProvider:
    """Map a provider name to PaymentProvider, defaulting to PAYMENT_PROVIDER."""
    if isinstance(provider, PaymentProvider):
        return provider
    name = (provider or config.PAYMENT_PROVIDER or "stripe").strip().lower()
    try:
        return PaymentProvider(name)
    except ValueError:
        logger.warning("Unknown payment provider '%s', defaulting to Stripe", name)
        return PaymentProvider.STRIPE


def get_payment_adapter(provider: Optional[Union[str, PaymentProvider]] = None) -> PaymentAdapter:
    """
    Build the payment adapter for a provider.

    Args:
        provider: "stripe" or "square" (defaults to PAYMENT_PROVIDER env var)

    Returns:
        A configured PaymentAdapter
    """
    provider = resolve_provider(provider)
    if provider == PaymentProvider.SQUARE:
        adapter = SquarePaymentAdapter(config.get_square_config())
    else:
        adapter = StripePaymentAdapter(config.get_stripe_config())
    logger.info("Initialized payment adapter: %s", provider.value)
    return adapter


__all__ = [
    "ChargeHandle",
    "ChargeResult",
    "FeeSplit",
    "PaymentAdapter",
    "PaymentError",
    "PaymentProvider",
    "SquarePaymentAdapter",
    "StripePaymentAdapter",
    "get_payment_adapter",
    "resolve_provider",
]
