"""
Routes Package for the Kiosk API
================================

This package contains all API route definitions organized by domain. Each module
defines a FastAPI APIRouter with related endpoints grouped together.

Architecture Overview:
----------------------
**Kiosk Routes:**
- public.py: Health, pricing and the public menu
- orders.py: Order creation and lookup

**Payment Routes (only the configured provider is mounted):**
- payments_stripe.py: Payment intents, Stripe Connect, webhooks
- payments_square.py: Card payments, merchant OAuth

**Admin Routes (require the X-Admin-Password header):**
- admin_menu.py: Category and item CRUD
- admin_settings.py: Kiosk settings
- admin_print.py: PrintNode diagnostics

Route Dependencies:
-------------------
Common dependencies are injected via FastAPI's Depends():
- get_db / get_optional_db: Database session
- verify_admin_password: Admin authentication
- get_payment_adapter, get_printer, get_order_service: Service objects from
  ``app.state`` (see dependencies.py)

Error Handling:
---------------
Routes raise HTTPException for error conditions:
- 400: Bad request (unknown category, printer not configured, bad webhook)
- 401: Unauthorized (missing or wrong admin password)
- 404: Not found (invalid ID or order number)
- 500: Processor or upstream failure
- 503: Service unavailable (database or admin password not configured)
"""

from .public import public_router
from .orders import orders_router
from .payments_stripe import stripe_router
from .payments_square import square_router
from .admin_menu import admin_menu_router
from .admin_settings import admin_settings_router
from .admin_print import admin_print_router

__all__ = [
    "public_router",
    "orders_router",
    "stripe_router",
    "square_router",
    "admin_menu_router",
    "admin_settings_router",
    "admin_print_router",
]
