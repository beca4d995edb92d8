"""
Public Routes for the Kiosk API
===============================

Endpoints the kiosk calls without authentication.

Endpoints:
----------
- GET /api/health: Liveness plus which optional pieces are configured
- GET /api/pricing: Kiosk fee and tax rate used for the checkout estimate
- GET /api/menu: Available items grouped by category

Usage:
------
    GET /api/menu
    {
        "Appetizers": [{"id": 1, "name": "Wings", "price": 10.99, "description": "..."}],
        "Entrees": [...]
    }
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import config
from ..db import get_db, get_optional_db, is_database_configured
from ..dependencies import get_payment_adapter
from ..payments.base import PaymentAdapter
from ..schemas.menu import PublicMenuItem
from ..services.menu import build_public_menu
from ..services.settings_store import load_kiosk_settings


logger = logging.getLogger(__name__)

public_router = APIRouter(prefix="/api", tags=["Public"])


@public_router.get("/health")
def health(adapter: PaymentAdapter = Depends(get_payment_adapter)) -> Dict[str, Any]:
    """Health check endpoint. Returns ok if the service is running."""
    return {
        "status": "ok",
        "database": is_database_configured(),
        "paymentProvider": adapter.provider.value,
    }


@public_router.get("/pricing")
def pricing(db: Optional[Session] = Depends(get_optional_db)) -> Dict[str, float]:
    """Kiosk fee (from settings) and tax rate, so the kiosk's estimate matches the charge."""
    settings = load_kiosk_settings(db)
    return {"kioskFee": settings.kiosk_fee, "taxRate": config.TAX_RATE}


@public_router.get("/menu", response_model=Dict[str, List[PublicMenuItem]])
def public_menu(db: Session = Depends(get_db)) -> Dict[str, List[dict]]:
    return build_public_menu(db)
