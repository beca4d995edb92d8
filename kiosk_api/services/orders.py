"""
Order Service for the Kiosk API
===============================

Creates kiosk orders after the customer's payment has gone through.

Order Creation Steps:
---------------------
1. Mint the order number (prefix + last 8 digits of the time in milliseconds)
2. Persist the order row (status "pending")
3. Print the receipt if a PrintNode printer is configured
4. Email the restaurant if Resend is configured
5. Return the order number

Best-Effort Policy:
-------------------
The card has already been charged when this runs, so nothing after step 1 may
fail the request. Persistence, printing and email each catch their own errors,
log them, and report the outcome to the NotificationSink. The order number is
returned even when all three failed.

The order totals are taken from the kiosk as sent; the server does not
re-price the cart.
"""

import logging
import time
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import config
from ..models import Order
from ..schemas.orders import OrderCreate
from .email_service import OrderEmailer
from .notifications import LoggingSink, NotificationSink, SideEffect, SideEffectResult, SideEffectStatus
from .printing import PrintNodeClient
from .receipt import generate_receipt
from .settings_store import load_kiosk_settings


logger = logging.getLogger(__name__)


def generate_order_number(
    clock: Callable[[], float] = time.time,
    prefix: str = config.ORDER_NUMBER_PREFIX,
) -> str:
    """Prefix plus the last 8 digits of the current time in milliseconds."""
    millis = str(int(clock() * 1000))
    return f"{prefix}{millis[-8:]}"


class OrderService:
    """
    Order creation with best-effort side effects.

    Args:
        db: Database session, or None when no database is configured
        printer: PrintNode client
        emailer: Resend notifier
        sink: Receives one SideEffectResult per side effect
        payment_provider: Name stored with the order ("stripe" / "square")
        clock: Returns the current time in seconds (for order numbers)
    """

    def __init__(
        self,
        db: Optional[Session],
        printer: PrintNodeClient,
        emailer: OrderEmailer,
        sink: Optional[NotificationSink] = None,
        payment_provider: Optional[str] = None,
        clock: Callable[[], float] = time.time,
        tax_rate: float = config.TAX_RATE,
        restaurant_name: str = config.RESTAURANT_NAME,
    ):
        self.db = db
        self.printer = printer
        self.emailer = emailer
        self.sink = sink or LoggingSink()
        self.payment_provider = payment_provider
        self.clock = clock
        self.tax_rate = tax_rate
        self.restaurant_name = restaurant_name

    def create_order(self, payload: OrderCreate) -> str:
        order_number = generate_order_number(self.clock)
        order = self._order_record(order_number, payload)

        self._persist(order)
        self._print_receipt(order)
        self._send_email(order)

        logger.info("Order %s created", order_number)
        return order_number

    def _order_record(self, order_number: str, payload: OrderCreate) -> Dict[str, Any]:
        return {
            "order_number": order_number,
            "items": payload.snapshot_items(),
            "subtotal": payload.subtotal,
            "tax": payload.tax,
            "kiosk_fee": payload.kiosk_fee,
            "total": payload.total,
            "customer_name": payload.customer_name,
            "customer_phone": payload.customer_phone,
            "delivery_location": payload.delivery_location,
            "payment_reference": payload.payment_reference,
        }

    def _report(self, effect: SideEffect, order_number: str, status: SideEffectStatus, detail: str = None) -> None:
        self.sink.record(SideEffectResult(effect, order_number, status, detail))

    def _persist(self, order: Dict[str, Any]) -> None:
        number = order["order_number"]
        if self.db is None:
            self._report(SideEffect.PERSIST, number, SideEffectStatus.SKIPPED, "database not configured")
            return
        try:
            self.db.add(Order(
                payment_provider=self.payment_provider,
                status="pending",
                **order,
            ))
            self.db.commit()
        except Exception as e:
            logger.exception("Database error saving order %s", number)
            try:
                self.db.rollback()
            except SQLAlchemyError:
                logger.warning("Rollback failed for order %s", number)
            self._report(SideEffect.PERSIST, number, SideEffectStatus.FAILED, str(e))
            return
        self._report(SideEffect.PERSIST, number, SideEffectStatus.SUCCEEDED)

    def _print_receipt(self, order: Dict[str, Any]) -> None:
        number = order["order_number"]
        if self.db is None:
            self._report(SideEffect.PRINT, number, SideEffectStatus.SKIPPED, "database not configured")
            return
        try:
            printer = load_kiosk_settings(self.db).printer
            if printer is None:
                self._report(SideEffect.PRINT, number, SideEffectStatus.SKIPPED, "printer not configured")
                return
            receipt = generate_receipt(
                order,
                printed_at=datetime.fromtimestamp(self.clock()),
                restaurant_name=self.restaurant_name,
                tax_rate=self.tax_rate,
            )
            self.printer.send_print_job(receipt, printer)
        except Exception as e:
            logger.error("Print error for order %s: %s", number, e)
            self._report(SideEffect.PRINT, number, SideEffectStatus.FAILED, str(e))
            return
        logger.info("Receipt printed for order %s", number)
        self._report(SideEffect.PRINT, number, SideEffectStatus.SUCCEEDED)

    def _send_email(self, order: Dict[str, Any]) -> None:
        number = order["order_number"]
        if not self.emailer.enabled:
            self._report(SideEffect.EMAIL, number, SideEffectStatus.SKIPPED, "email not configured")
            return
        try:
            self.emailer.send_order_notification(order, self.tax_rate)
        except Exception as e:
            logger.error("Email error for order %s: %s", number, e)
            self._report(SideEffect.EMAIL, number, SideEffectStatus.FAILED, str(e))
            return
        self._report(SideEffect.EMAIL, number, SideEffectStatus.SUCCEEDED)


def get_order_by_number(db: Session, order_number: str) -> Optional[Order]:
    return db.query(Order).filter(Order.order_number == order_number).first()
