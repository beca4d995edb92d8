"""
Services Package for the Kiosk API
==================================

Business logic and integration clients, kept out of the route modules so they
can be exercised without HTTP.

Available Services:
-------------------
- **pricing**: Subtotal / kiosk fee / tax / total calculation
- **receipt**: 32-column thermal receipt text
- **printing**: PrintNode client
- **email_service**: Resend order notifications
- **notifications**: Side-effect results and sinks
- **settings_store**: Typed view over the kiosk_settings table
- **menu**: Public menu assembly
- **orders**: Order creation with best-effort side effects

Services receive their dependencies (database sessions, configuration,
clients) rather than creating them, so tests can swap in fakes.
"""

from . import pricing
from . import receipt
from . import printing
from . import email_service
from . import notifications
from . import settings_store
from . import menu
from . import orders

__all__ = [
    "pricing",
    "receipt",
    "printing",
    "email_service",
    "notifications",
    "settings_store",
    "menu",
    "orders",
]
