"""
Schemas Package for the Kiosk API
=================================

Pydantic models used for request validation and response serialization.

Schema Organization:
--------------------
- **menu.py**: Category and menu item CRUD schemas, public menu item
- **orders.py**: Order creation and order lookup schemas
- **payments.py**: Processor endpoints and admin settings schemas
"""

from .menu import (
    CategoryOut,
    CategoryCreate,
    CategoryUpdate,
    MenuItemOut,
    MenuItemCreate,
    MenuItemUpdate,
    PublicMenuItem,
)
from .orders import OrderLineIn, OrderCreate, OrderCreateResponse, OrderOut
from .payments import (
    PaymentIntentCreate,
    PaymentIntentOut,
    SquarePaymentCreate,
    SquarePaymentOut,
    StripeConnectRequest,
    SettingUpdate,
    SettingOut,
)

__all__ = [
    "CategoryOut",
    "CategoryCreate",
    "CategoryUpdate",
    "MenuItemOut",
    "MenuItemCreate",
    "MenuItemUpdate",
    "PublicMenuItem",
    "OrderLineIn",
    "OrderCreate",
    "OrderCreateResponse",
    "OrderOut",
    "PaymentIntentCreate",
    "PaymentIntentOut",
    "SquarePaymentCreate",
    "SquarePaymentOut",
    "StripeConnectRequest",
    "SettingUpdate",
    "SettingOut",
]
