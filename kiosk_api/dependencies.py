"""
FastAPI dependencies for the service objects built in create_app.

The payment adapter, print client, emailer and notification sink are created
once at startup and stored on ``app.state``; routes reach them through these
functions so tests can pass fakes to ``create_app``.
"""

from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from . import config
from .db import get_optional_db
from .payments.base import PaymentAdapter
from .services.email_service import OrderEmailer
from .services.notifications import NotificationSink
from .services.orders import OrderService
from .services.printing import PrintNodeClient


def get_payment_adapter(request: Request) -> PaymentAdapter:
    return request.app.state.payment_adapter


def get_printer(request: Request) -> PrintNodeClient:
    return request.app.state.printer


def get_emailer(request: Request) -> OrderEmailer:
    return request.app.state.emailer


def get_sink(request: Request) -> NotificationSink:
    return request.app.state.sink


def get_order_service(
    db: Optional[Session] = Depends(get_optional_db),
    adapter: PaymentAdapter = Depends(get_payment_adapter),
    printer: PrintNodeClient = Depends(get_printer),
    emailer: OrderEmailer = Depends(get_emailer),
    sink: NotificationSink = Depends(get_sink),
) -> OrderService:
    return OrderService(
        db=db,
        printer=printer,
        emailer=emailer,
        sink=sink,
        payment_provider=adapter.provider.value,
        tax_rate=config.TAX_RATE,
        restaurant_name=config.RESTAURANT_NAME,
    )
