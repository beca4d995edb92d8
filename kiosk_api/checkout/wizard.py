"""
Checkout Wizard for the Kiosk
=============================

A linear state machine for the kiosk checkout flow. The browser renders one
screen per step; this module holds the rules for moving between them so the
whole flow (cart → charge → order → confirmation) can run without a browser.

Steps:
------
    MENU → REVIEW → CUSTOMER_INFO → PAYMENT → CONFIRMED → MENU

- MENU: Customer browses and fills the cart.
- REVIEW: Cart and totals are shown. Cancel returns to MENU.
- CUSTOMER_INFO: Name, phone and delivery location, all required. Back
  returns to REVIEW.
- PAYMENT: The card is charged through the payment adapter, then the order is
  placed. A failed charge keeps the wizard here with an error; the customer
  may retry as often as they like. Cancel returns to MENU.
- CONFIRMED: Shows the order number and counts down from 30 seconds, then
  returns to MENU for the next customer.

Cancelling keeps the cart but forgets the customer info. Any other move not
listed above raises InvalidTransition.

Usage:
------
    wizard = CheckoutWizard(adapter, order_service)
    wizard.cart.add_item(1, "Wings", 10.0)
    wizard.start_checkout()
    wizard.continue_to_info()
    wizard.submit_customer_info("Ann", "555-0100", "Table 4")
    wizard.submit_payment("pm_card_visa")
    wizard.order_number  # "WK12345678"
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .. import config
from ..payments.base import PaymentAdapter, PaymentError, PaymentProvider
from ..schemas.orders import OrderCreate
from ..services.orders import OrderService
from ..services.pricing import PriceBreakdown
from ..services.settings_store import KioskSettings
from .cart import Cart

logger = logging.getLogger(__name__)

CONFIRMATION_SECONDS = 30
MISSING_FIELDS_ERROR = "Please fill in all fields"


class CheckoutStep(str, Enum):
    """Screens of the checkout flow."""
    MENU = "menu"
    REVIEW = "review"
    CUSTOMER_INFO = "customer_info"
    PAYMENT = "payment"
    CONFIRMED = "confirmed"


class InvalidTransition(Exception):
    """Raised when an action is not allowed in the current step."""

    def __init__(self, action: str, step: CheckoutStep):
        super().__init__(f"Cannot {action} from step '{step.value}'")
        self.action = action
        self.step = step


@dataclass
class CustomerInfo:
    name: str = ""
    phone: str = ""
    location: str = ""


class CheckoutWizard:
    """
    Drives one kiosk through checkout.

    Args:
        payment_adapter: Charges the card
        order_service: Places the order once the charge succeeded
        settings: Kiosk settings (kiosk fee, connected accounts)
        tax_rate: Rate applied to subtotal + kiosk fee
        currency: Charge currency
    """

    def __init__(
        self,
        payment_adapter: PaymentAdapter,
        order_service: OrderService,
        settings: Optional[KioskSettings] = None,
        tax_rate: float = config.TAX_RATE,
        currency: str = config.DEFAULT_CURRENCY,
    ):
        self.payment_adapter = payment_adapter
        self.order_service = order_service
        self.settings = settings or KioskSettings()
        self.tax_rate = tax_rate
        self.currency = currency

        self.cart = Cart()
        self.step = CheckoutStep.MENU
        self.customer = CustomerInfo()
        self.error: Optional[str] = None
        self.order_number: Optional[str] = None
        self.countdown = 0

    def _require(self, action: str, *steps: CheckoutStep) -> None:
        if self.step not in steps:
            raise InvalidTransition(action, self.step)

    @property
    def totals(self) -> PriceBreakdown:
        return self.cart.totals(kiosk_fee=self.settings.kiosk_fee, tax_rate=self.tax_rate)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def start_checkout(self) -> None:
        self._require("start checkout", CheckoutStep.MENU)
        if self.cart.is_empty:
            raise InvalidTransition("start checkout with an empty cart", self.step)
        self.error = None
        self.step = CheckoutStep.REVIEW

    def continue_to_info(self) -> None:
        self._require("continue to customer info", CheckoutStep.REVIEW)
        self.step = CheckoutStep.CUSTOMER_INFO

    def back(self) -> None:
        self._require("go back", CheckoutStep.CUSTOMER_INFO)
        self.error = None
        self.step = CheckoutStep.REVIEW

    def submit_customer_info(self, name: str, phone: str, location: str) -> bool:
        """Returns True and moves to PAYMENT when all three fields are filled in."""
        self._require("submit customer info", CheckoutStep.CUSTOMER_INFO)
        self.customer = CustomerInfo(name=name, phone=phone, location=location)
        if not (name or "").strip() or not (phone or "").strip() or not (location or "").strip():
            self.error = MISSING_FIELDS_ERROR
            return False
        self.error = None
        self.step = CheckoutStep.PAYMENT
        return True

    def cancel(self) -> None:
        self._require("cancel", CheckoutStep.REVIEW, CheckoutStep.PAYMENT)
        self.customer = CustomerInfo()
        self.error = None
        self.step = CheckoutStep.MENU

    # ------------------------------------------------------------------
    # Payment
    # ------------------------------------------------------------------

    def submit_payment(self, card_credential: str) -> bool:
        """
        Charge the card and place the order.

        Returns:
            True on success (step is CONFIRMED), False when the charge failed
            (step stays PAYMENT and ``error`` holds the message)
        """
        self._require("submit payment", CheckoutStep.PAYMENT)
        self.error = None
        totals = self.totals

        try:
            handle = self.payment_adapter.create_charge(totals.amount_minor_units, self.currency, self.settings)
            result = self.payment_adapter.complete_charge(handle, card_credential, self.settings)
        except PaymentError as e:
            logger.warning("Kiosk payment failed: %s", e.message)
            self.error = e.message
            return False

        amounts = totals.rounded()
        reference_field = "payment_intent_id" if self.payment_adapter.provider == PaymentProvider.STRIPE else "payment_id"
        order = OrderCreate(
            items=self.cart.to_order_lines(),
            subtotal=amounts["subtotal"],
            tax=amounts["tax"],
            kiosk_fee=amounts["kiosk_fee"],
            total=amounts["total"],
            customer_name=self.customer.name,
            customer_phone=self.customer.phone,
            delivery_location=self.customer.location,
            **{reference_field: result.settlement_id},
        )
        self.order_number = self.order_service.create_order(order)

        self.cart.clear()
        self.customer = CustomerInfo()
        self.countdown = CONFIRMATION_SECONDS
        self.step = CheckoutStep.CONFIRMED
        return True

    # ------------------------------------------------------------------
    # Confirmation screen
    # ------------------------------------------------------------------

    def tick(self, seconds: int = 1) -> None:
        self._require("count down", CheckoutStep.CONFIRMED)
        self.countdown = max(0, self.countdown - seconds)
        if self.countdown == 0:
            self._reset()

    def start_new_order(self) -> None:
        self._require("start a new order", CheckoutStep.CONFIRMED)
        self._reset()

    def _reset(self) -> None:
        self.step = CheckoutStep.MENU
        self.order_number = None
        self.countdown = 0
        self.error = None
