"""
Order Schemas for the Kiosk API
===============================

Pydantic models for the customer-facing order endpoints. The kiosk front end
sends camelCase JSON; the models accept both the camelCase aliases and the
snake_case field names.

Endpoint Coverage:
------------------
- POST /api/orders: Create an order after the payment succeeded
- GET /api/orders/{order_number}: Fetch a persisted order

Payment Reference:
------------------
The Stripe kiosk sends ``paymentIntentId``; the Square kiosk sends
``paymentId``. Both land in ``payment_reference``.

Usage:
------
    payload = OrderCreate.model_validate({
        "items": [{"id": 1, "name": "Wings", "price": 10.0, "quantity": 2}],
        "subtotal": 20.0, "tax": 1.9, "kioskFee": 3.0, "total": 24.9,
        "customerName": "Ann", "customerPhone": "555-0100",
        "deliveryLocation": "Table 4", "paymentIntentId": "pi_123",
    })
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class OrderLineIn(BaseModel):
    """A cart line as sent by the kiosk (price is the snapshot at purchase)."""
    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    name: str
    price: float = Field(ge=0)
    quantity: int = Field(ge=1)


class OrderCreate(BaseModel):
    """Request model for POST /api/orders."""
    model_config = ConfigDict(populate_by_name=True)

    items: List[OrderLineIn]
    subtotal: float
    tax: float
    kiosk_fee: float = Field(alias="kioskFee")
    total: float
    customer_name: str = Field(default="", alias="customerName")
    customer_phone: str = Field(default="", alias="customerPhone")
    delivery_location: str = Field(default="", alias="deliveryLocation")
    payment_intent_id: Optional[str] = Field(default=None, alias="paymentIntentId")
    payment_id: Optional[str] = Field(default=None, alias="paymentId")

    @model_validator(mode="after")
    def _no_conflicting_references(self) -> "OrderCreate":
        if self.payment_intent_id and self.payment_id and self.payment_intent_id != self.payment_id:
            raise ValueError("Send either paymentIntentId or paymentId, not both")
        return self

    @property
    def payment_reference(self) -> Optional[str]:
        return self.payment_intent_id or self.payment_id

    def snapshot_items(self) -> List[Dict[str, Any]]:
        return [line.model_dump() for line in self.items]


class OrderCreateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_number: str = Field(serialization_alias="orderNumber")
    success: bool = True


class OrderOut(BaseModel):
    """Persisted order as returned by GET /api/orders/{order_number}."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_number: str
    items: List[Dict[str, Any]]
    subtotal: float
    tax: float
    kiosk_fee: float
    total: float
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    delivery_location: Optional[str] = None
    payment_reference: Optional[str] = None
    payment_provider: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
