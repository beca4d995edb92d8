"""
Kiosk checkout flow: the cart and the step-by-step checkout wizard.
"""

from .cart import Cart, CartLine
from .wizard import (
    CONFIRMATION_SECONDS,
    CheckoutStep,
    CheckoutWizard,
    CustomerInfo,
    InvalidTransition,
)

__all__ = [
    "Cart",
    "CartLine",
    "CONFIRMATION_SECONDS",
    "CheckoutStep",
    "CheckoutWizard",
    "CustomerInfo",
    "InvalidTransition",
]
