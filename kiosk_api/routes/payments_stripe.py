"""
Stripe Routes for the Kiosk API
===============================

Mounted only when PAYMENT_PROVIDER=stripe.

Endpoints:
----------
- POST /api/create-payment-intent: Start a charge, return the client secret
- POST /api/admin/stripe/connect: Stripe Connect onboarding link (admin)
- GET /api/admin/stripe/status: Connected account status (admin)
- POST /api/webhooks/stripe: Stripe event webhook

Split Payments:
---------------
When a Stripe Connect account is stored in ``stripe_connected_account_id``,
payment intents are destination charges: the kiosk fee is kept as the
application fee and the rest goes to the restaurant.

Webhook Verification:
---------------------
With STRIPE_WEBHOOK_SECRET set, the ``Stripe-Signature`` header is verified
and a bad signature answers 400. Without it, events are acknowledged without
verification or processing.
"""

import logging
from typing import Any, Dict, Optional

import stripe
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from ..auth import verify_admin_password
from ..db import get_db, get_optional_db
from ..dependencies import get_payment_adapter
from ..payments.base import PaymentError
from ..payments.stripe_adapter import StripePaymentAdapter
from ..schemas.payments import PaymentIntentCreate, PaymentIntentOut, StripeConnectRequest
from ..services.pricing import to_minor_units
from ..services.settings_store import STRIPE_CONNECTED_ACCOUNT_ID, load_kiosk_settings, upsert_setting


logger = logging.getLogger(__name__)

stripe_router = APIRouter(prefix="/api", tags=["Payments - Stripe"])


@stripe_router.post("/create-payment-intent", response_model=PaymentIntentOut, response_model_by_alias=True)
def create_payment_intent(
    payload: PaymentIntentCreate,
    db: Optional[Session] = Depends(get_optional_db),
    adapter: StripePaymentAdapter = Depends(get_payment_adapter),
) -> PaymentIntentOut:
    settings = load_kiosk_settings(db)
    try:
        handle = adapter.create_charge(to_minor_units(payload.amount), payload.currency, settings)
    except PaymentError as e:
        raise HTTPException(status_code=500, detail=e.message)

    return PaymentIntentOut(client_secret=handle.client_handle, payment_intent_id=handle.settlement_id)


# =============================================================================
# Stripe Connect (admin)
# =============================================================================

@stripe_router.post("/admin/stripe/connect")
def stripe_connect(
    payload: StripeConnectRequest,
    _admin: None = Depends(verify_admin_password),
    db: Session = Depends(get_db),
    adapter: StripePaymentAdapter = Depends(get_payment_adapter),
) -> Dict[str, str]:
    settings = load_kiosk_settings(db)
    try:
        link = adapter.create_onboarding_link(payload.return_url, settings)
    except PaymentError as e:
        raise HTTPException(status_code=500, detail=e.message)

    if link["account_id"] != settings.stripe_connected_account_id:
        upsert_setting(db, STRIPE_CONNECTED_ACCOUNT_ID, link["account_id"])

    return {"url": link["url"], "accountId": link["account_id"]}


@stripe_router.get("/admin/stripe/status")
def stripe_status(
    _admin: None = Depends(verify_admin_password),
    db: Session = Depends(get_db),
    adapter: StripePaymentAdapter = Depends(get_payment_adapter),
) -> Dict[str, Any]:
    try:
        return adapter.connection_status(load_kiosk_settings(db))
    except PaymentError as e:
        raise HTTPException(status_code=500, detail=e.message)


# =============================================================================
# Webhooks
# =============================================================================

@stripe_router.post("/webhooks/stripe")
async def stripe_webhook(
    request: Request,
    adapter: StripePaymentAdapter = Depends(get_payment_adapter),
) -> Dict[str, bool]:
    if not adapter.config.webhook_secret:
        return {"received": True}

    payload = await request.body()
    signature = request.headers.get("stripe-signature")
    if not signature:
        logger.warning("Stripe webhook without signature header")
        raise HTTPException(status_code=400, detail="Webhook error")

    try:
        event = adapter.parse_webhook(payload, signature)
    except (ValueError, stripe.SignatureVerificationError) as e:
        logger.warning("Webhook error: %s", e)
        raise HTTPException(status_code=400, detail="Webhook error")

    if event["type"] == "payment_intent.succeeded":
        logger.info("Payment succeeded: %s", event["data"]["object"]["id"])

    return {"received": True}
