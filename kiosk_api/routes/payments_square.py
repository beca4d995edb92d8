"""
Square Routes for the Kiosk API
===============================

Mounted only when PAYMENT_PROVIDER=square.

Endpoints:
----------
- GET /api/square/config: Application and location ids for the Web Payments SDK
- POST /api/square/payment: Charge a card token
- GET /api/admin/square/auth-url: Start merchant OAuth (admin)
- GET /api/admin/square/callback: OAuth redirect target
- POST /api/admin/square/disconnect: Revoke and forget the merchant (admin)
- GET /api/admin/square/status: Merchant connection status (admin)

OAuth State:
------------
The callback is opened by the merchant's browser straight from Square, so it
cannot carry the admin header. It is protected instead by the one-time
``state`` token stored when the auth URL was issued: the callback is rejected
unless the returned state matches, and the stored state is deleted as soon as
it has been checked.
"""

import logging
import secrets
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from .. import config
from ..auth import verify_admin_password
from ..db import get_db, get_optional_db
from ..dependencies import get_payment_adapter
from ..payments.base import PaymentError
from ..payments.square_adapter import SquarePaymentAdapter
from ..schemas.payments import SquarePaymentCreate, SquarePaymentOut
from ..services.pricing import to_minor_units
from ..services.settings_store import (
    SQUARE_MERCHANT_ACCESS_TOKEN,
    SQUARE_MERCHANT_ID,
    SQUARE_MERCHANT_KEYS,
    SQUARE_MERCHANT_LOCATION_ID,
    SQUARE_MERCHANT_REFRESH_TOKEN,
    SQUARE_OAUTH_STATE,
    delete_settings,
    get_setting,
    load_kiosk_settings,
    upsert_setting,
)


logger = logging.getLogger(__name__)

square_router = APIRouter(prefix="/api", tags=["Payments - Square"])


@square_router.get("/square/config")
def square_config(
    db: Optional[Session] = Depends(get_optional_db),
    adapter: SquarePaymentAdapter = Depends(get_payment_adapter),
) -> Dict[str, Any]:
    return adapter.public_config(load_kiosk_settings(db))


@square_router.post("/square/payment", response_model=SquarePaymentOut, response_model_by_alias=True)
def square_payment(
    payload: SquarePaymentCreate,
    db: Optional[Session] = Depends(get_optional_db),
    adapter: SquarePaymentAdapter = Depends(get_payment_adapter),
) -> SquarePaymentOut:
    settings = load_kiosk_settings(db)
    try:
        handle = adapter.create_charge(to_minor_units(payload.amount), payload.currency, settings)
        result = adapter.complete_charge(handle, payload.source_id, settings)
    except PaymentError as e:
        raise HTTPException(status_code=500, detail=e.message)

    return SquarePaymentOut(success=True, payment_id=result.settlement_id, status=result.status)


# =============================================================================
# Merchant OAuth (admin)
# =============================================================================

@square_router.get("/admin/square/auth-url")
def square_auth_url(
    _admin: None = Depends(verify_admin_password),
    db: Session = Depends(get_db),
    adapter: SquarePaymentAdapter = Depends(get_payment_adapter),
) -> Dict[str, str]:
    if not adapter.config.application_id or not adapter.config.application_secret:
        raise HTTPException(status_code=400, detail="Square OAuth not configured")

    state = secrets.token_urlsafe(32)
    upsert_setting(db, SQUARE_OAUTH_STATE, state)
    return {"url": adapter.authorization_url(state)}


@square_router.get("/admin/square/callback")
def square_callback(
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    db: Session = Depends(get_db),
    adapter: SquarePaymentAdapter = Depends(get_payment_adapter),
) -> RedirectResponse:
    expected = get_setting(db, SQUARE_OAUTH_STATE)
    if not state or not expected or not secrets.compare_digest(state, expected):
        logger.warning("Square OAuth callback with invalid state")
        raise HTTPException(status_code=400, detail="Invalid OAuth state")

    delete_settings(db, [SQUARE_OAUTH_STATE])

    if error or not code:
        logger.warning("Square OAuth was not authorized: %s", error)
        return RedirectResponse(url=f"{config.ADMIN_UI_URL}?square=denied", status_code=302)

    try:
        credentials = adapter.exchange_code(code)
        location_id = adapter.fetch_main_location(credentials["access_token"])
    except PaymentError as e:
        raise HTTPException(status_code=500, detail="Square authorization failed") from e

    upsert_setting(db, SQUARE_MERCHANT_ID, credentials["merchant_id"], commit=False)
    upsert_setting(db, SQUARE_MERCHANT_ACCESS_TOKEN, credentials["access_token"], commit=False)
    upsert_setting(db, SQUARE_MERCHANT_REFRESH_TOKEN, credentials["refresh_token"], commit=False)
    upsert_setting(db, SQUARE_MERCHANT_LOCATION_ID, location_id, commit=False)
    db.commit()

    logger.info("Square merchant %s connected", credentials["merchant_id"])
    return RedirectResponse(url=f"{config.ADMIN_UI_URL}?square=connected", status_code=302)


@square_router.post("/admin/square/disconnect")
def square_disconnect(
    _admin: None = Depends(verify_admin_password),
    db: Session = Depends(get_db),
    adapter: SquarePaymentAdapter = Depends(get_payment_adapter),
) -> Dict[str, bool]:
    settings = load_kiosk_settings(db)
    if settings.square_merchant_access_token:
        try:
            adapter.revoke(settings.square_merchant_access_token)
        except PaymentError:
            # Forget the merchant locally even if Square could not be reached
            logger.warning("Square token revoke failed for merchant %s", settings.square_merchant_id)

    delete_settings(db, SQUARE_MERCHANT_KEYS)
    logger.info("Square merchant disconnected")
    return {"success": True}


@square_router.get("/admin/square/status")
def square_status(
    _admin: None = Depends(verify_admin_password),
    db: Session = Depends(get_db),
    adapter: SquarePaymentAdapter = Depends(get_payment_adapter),
) -> Dict[str, Any]:
    return adapter.connection_status(load_kiosk_settings(db))
