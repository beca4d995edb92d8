"""
Stripe payment adapter (hosted-intent model).

The server creates a PaymentIntent and hands its client secret to the kiosk;
Stripe.js confirms it in the browser, so card data never reaches this server.
With a Stripe Connect account configured the intent is a destination charge:
``application_fee_amount`` is the kiosk fee and the remainder is transferred
to the restaurant's account.

Every call passes ``api_key`` explicitly instead of setting ``stripe.api_key``
globally, so several adapters (e.g. in tests) can coexist.
"""

import logging
from typing import Any, Dict, Optional

import stripe

from ..config import StripeConfig
from ..services.settings_store import KioskSettings
from .base import ChargeHandle, ChargeResult, PaymentAdapter, PaymentError, PaymentProvider

logger = logging.getLogger(__name__)


class StripePaymentAdapter(PaymentAdapter):
    provider = PaymentProvider.STRIPE

    def __init__(self, stripe_config: StripeConfig):
        self.config = stripe_config

    def connected_account(self, settings: KioskSettings) -> Optional[str]:
        return settings.stripe_connected_account_id

    def create_charge(self, amount_minor: int, currency: str, settings: KioskSettings) -> ChargeHandle:
        params: Dict[str, Any] = {
            "amount": amount_minor,
            "currency": currency.lower(),
            # Card-only kiosk: no redirect-based payment methods
            "automatic_payment_methods": {"enabled": True, "allow_redirects": "never"},
        }

        split = self.fee_split(amount_minor, settings)
        if split:
            params["application_fee_amount"] = split.application_fee_minor
            params["transfer_data"] = {"destination": split.destination}

        try:
            intent = stripe.PaymentIntent.create(api_key=self.config.secret_key, **params)
        except stripe.StripeError as e:
            logger.error("Payment intent error: %s", e)
            raise PaymentError() from e

        logger.info("Created payment intent %s for %d %s", intent.id, amount_minor, currency)
        return ChargeHandle(
            amount_minor=amount_minor,
            currency=currency.lower(),
            client_handle=intent.client_secret,
            settlement_id=intent.id,
            split=split,
        )

    def complete_charge(self, handle: ChargeHandle, card_credential: str, settings: KioskSettings) -> ChargeResult:
        """Confirm the intent server-side with a PaymentMethod id."""
        if not handle.settlement_id:
            raise PaymentError("Payment was not started")
        try:
            intent = stripe.PaymentIntent.confirm(
                handle.settlement_id,
                payment_method=card_credential,
                api_key=self.config.secret_key,
            )
        except stripe.StripeError as e:
            logger.error("Payment confirmation error for %s: %s", handle.settlement_id, e)
            raise PaymentError() from e

        if intent.status != "succeeded":
            logger.warning("Payment intent %s ended in status %s", intent.id, intent.status)
            raise PaymentError("Payment was not completed")
        return ChargeResult(settlement_id=intent.id, status=intent.status)

    def public_config(self, settings: KioskSettings) -> Dict[str, Any]:
        return {
            "provider": self.provider.value,
            "connectedAccountId": settings.stripe_connected_account_id,
        }

    # ------------------------------------------------------------------
    # Stripe Connect onboarding
    # ------------------------------------------------------------------

    def create_onboarding_link(self, return_url: str, settings: KioskSettings) -> Dict[str, str]:
        """
        Create (if needed) the restaurant's Express account and an onboarding link.

        Returns:
            dict with ``url`` and ``account_id``; the caller persists the id
        """
        account_id = settings.stripe_connected_account_id
        try:
            if not account_id:
                account = stripe.Account.create(
                    type="express",
                    country="US",
                    capabilities={
                        "card_payments": {"requested": True},
                        "transfers": {"requested": True},
                    },
                    api_key=self.config.secret_key,
                )
                account_id = account.id
                logger.info("Created Stripe Connect account %s", account_id)

            link = stripe.AccountLink.create(
                account=account_id,
                refresh_url=return_url,
                return_url=return_url,
                type="account_onboarding",
                api_key=self.config.secret_key,
            )
        except stripe.StripeError as e:
            logger.error("Stripe Connect error: %s", e)
            raise PaymentError("Failed to create Stripe Connect link") from e

        return {"url": link.url, "account_id": account_id}

    def connection_status(self, settings: KioskSettings) -> Dict[str, Any]:
        account_id = settings.stripe_connected_account_id
        if not account_id:
            return {"connected": False}
        try:
            account = stripe.Account.retrieve(account_id, api_key=self.config.secret_key)
        except stripe.StripeError as e:
            logger.error("Stripe status error: %s", e)
            raise PaymentError("Failed to check Stripe status") from e

        return {
            "connected": True,
            "accountId": account.id,
            "chargesEnabled": account.charges_enabled,
            "payoutsEnabled": account.payouts_enabled,
            "detailsSubmitted": account.details_submitted,
        }

    # ------------------------------------------------------------------
    # Webhooks
    # ------------------------------------------------------------------

    def parse_webhook(self, payload: bytes, signature: Optional[str]) -> Any:
        """
        Verify and decode a webhook event.

        Raises:
            ValueError: Invalid payload
            stripe.SignatureVerificationError: Bad signature
        """
        return stripe.Webhook.construct_event(payload, signature, self.config.webhook_secret)
