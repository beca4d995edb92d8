"""
Square payment adapter (server-relay model).

The kiosk tokenizes the card with Square's Web Payments SDK and posts the
single-use token here; the server then creates the payment through the Square
REST API. Each attempt gets a fresh idempotency key, so a retried submission
is a new charge attempt rather than a replay.

Merchant Connection (OAuth):
----------------------------
A restaurant connects its own Square account through OAuth. Once connected,
payments are created with the merchant's access token at the merchant's
location, and ``app_fee_money`` (the kiosk fee) goes to the platform. Without a
merchant, payments use the platform's own token and location.
"""

import logging
import uuid
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import requests

from ..config import SquareConfig
from ..services.settings_store import KioskSettings
from .base import ChargeHandle, ChargeResult, PaymentAdapter, PaymentError, PaymentProvider

logger = logging.getLogger(__name__)

SQUARE_API_VERSION = "2024-10-17"
OAUTH_SCOPES = [
    "MERCHANT_PROFILE_READ",
    "PAYMENTS_WRITE",
    "PAYMENTS_READ",
    "PAYMENTS_WRITE_ADDITIONAL_RECIPIENTS",
]


class SquarePaymentAdapter(PaymentAdapter):
    provider = PaymentProvider.SQUARE

    def __init__(self, square_config: SquareConfig, timeout: float = 30.0):
        self.config = square_config
        self.timeout = timeout

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------

    def _headers(self, access_token: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
            "Square-Version": SQUARE_API_VERSION,
        }

    def _post(self, path: str, body: Dict[str, Any], headers: Dict[str, str]) -> Dict[str, Any]:
        try:
            response = requests.post(
                f"{self.config.base_url}{path}",
                json=body,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Square request to %s failed: %s", path, e)
            raise PaymentError() from e

        try:
            data = response.json() if response.content else {}
        except ValueError:
            data = None
        if not isinstance(data, dict):
            logger.error("Square returned an unreadable response on %s (%d)", path, response.status_code)
            raise PaymentError()
        if not response.ok:
            errors = data.get("errors") or [{"detail": response.text}]
            logger.error("Square error on %s (%d): %s", path, response.status_code, errors)
            raise PaymentError()
        return data

    # ------------------------------------------------------------------
    # Charges
    # ------------------------------------------------------------------

    def connected_account(self, settings: KioskSettings) -> Optional[str]:
        if settings.square_merchant_connected:
            return settings.square_merchant_id
        return None

    def _charge_credentials(self, settings: KioskSettings) -> Dict[str, str]:
        if settings.square_merchant_connected:
            return {
                "access_token": settings.square_merchant_access_token,
                "location_id": settings.square_merchant_location_id or self.config.location_id,
            }
        return {"access_token": self.config.access_token, "location_id": self.config.location_id}

    def create_charge(self, amount_minor: int, currency: str, settings: KioskSettings) -> ChargeHandle:
        """Nothing to do server-side until the card token arrives."""
        return ChargeHandle(
            amount_minor=amount_minor,
            currency=currency.upper(),
            split=self.fee_split(amount_minor, settings),
        )

    def complete_charge(self, handle: ChargeHandle, card_credential: str, settings: KioskSettings) -> ChargeResult:
        credentials = self._charge_credentials(settings)
        body: Dict[str, Any] = {
            "source_id": card_credential,
            "idempotency_key": str(uuid.uuid4()),
            "amount_money": {"amount": handle.amount_minor, "currency": handle.currency},
            "location_id": credentials["location_id"],
        }
        if handle.split:
            body["app_fee_money"] = {
                "amount": handle.split.application_fee_minor,
                "currency": handle.currency,
            }

        data = self._post("/v2/payments", body, self._headers(credentials["access_token"]))
        payment = data.get("payment") or {}
        if not payment.get("id"):
            logger.error("Square payment response had no payment id")
            raise PaymentError()

        logger.info("Square payment %s status %s", payment["id"], payment.get("status"))
        return ChargeResult(settlement_id=payment["id"], status=payment.get("status", "UNKNOWN"))

    def public_config(self, settings: KioskSettings) -> Dict[str, Any]:
        return {
            "applicationId": self.config.application_id,
            "locationId": self._charge_credentials(settings)["location_id"],
            "environment": self.config.environment,
        }

    def connection_status(self, settings: KioskSettings) -> Dict[str, Any]:
        if not settings.square_merchant_connected:
            return {"connected": False}
        return {
            "connected": True,
            "merchantId": settings.square_merchant_id,
            "locationId": settings.square_merchant_location_id,
        }

    # ------------------------------------------------------------------
    # OAuth
    # ------------------------------------------------------------------

    def authorization_url(self, state: str) -> str:
        params = {
            "client_id": self.config.application_id,
            "scope": " ".join(OAUTH_SCOPES),
            "session": "false",
            "state": state,
        }
        if self.config.redirect_url:
            params["redirect_uri"] = self.config.redirect_url
        return f"{self.config.base_url}/oauth2/authorize?{urlencode(params)}"

    def exchange_code(self, code: str) -> Dict[str, Optional[str]]:
        """
        Exchange an authorization code for merchant credentials.

        Returns:
            dict with merchant_id, access_token, refresh_token
        """
        body = {
            "client_id": self.config.application_id,
            "client_secret": self.config.application_secret,
            "code": code,
            "grant_type": "authorization_code",
        }
        if self.config.redirect_url:
            body["redirect_uri"] = self.config.redirect_url

        data = self._post("/oauth2/token", body, {
            "Content-Type": "application/json",
            "Square-Version": SQUARE_API_VERSION,
        })
        if not data.get("access_token") or not data.get("merchant_id"):
            logger.error("Square token response missing access token or merchant id")
            raise PaymentError("Square authorization failed")

        return {
            "merchant_id": data["merchant_id"],
            "access_token": data["access_token"],
            "refresh_token": data.get("refresh_token"),
        }

    def fetch_main_location(self, access_token: str) -> Optional[str]:
        """Return the id of the merchant's first active location."""
        try:
            response = requests.get(
                f"{self.config.base_url}/v2/locations",
                headers=self._headers(access_token),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Square locations request failed: %s", e)
            raise PaymentError() from e

        if not response.ok:
            logger.error("Square locations error (%d): %s", response.status_code, response.text)
            raise PaymentError()

        try:
            locations = response.json().get("locations") or []
        except ValueError as e:
            logger.error("Square locations response was unreadable")
            raise PaymentError() from e

        for location in locations:
            if location.get("status", "ACTIVE") == "ACTIVE":
                return location.get("id")
        return None

    def revoke(self, access_token: str) -> None:
        self._post(
            "/oauth2/revoke",
            {"client_id": self.config.application_id, "access_token": access_token},
            {
                "Authorization": f"Client {self.config.application_secret}",
                "Content-Type": "application/json",
                "Square-Version": SQUARE_API_VERSION,
            },
        )
