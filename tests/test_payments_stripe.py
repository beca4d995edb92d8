"""
Tests for the Stripe payment adapter and routes.

The Stripe SDK is patched; no request leaves the test process.
"""
from types import SimpleNamespace
from unittest.mock import patch

import pytest
import stripe

from kiosk_api.config import StripeConfig
from kiosk_api.payments.base import ChargeHandle, PaymentError
from kiosk_api.payments.stripe_adapter import StripePaymentAdapter
from kiosk_api.services.settings_store import (
    KIOSK_FEE,
    STRIPE_CONNECTED_ACCOUNT_ID,
    KioskSettings,
    upsert_setting,
)


def fake_intent(intent_id="pi_123", status="requires_payment_method"):
    return SimpleNamespace(id=intent_id, client_secret=f"{intent_id}_secret_abc", status=status)


@pytest.fixture
def adapter():
    return StripePaymentAdapter(StripeConfig(secret_key="sk_test_123", webhook_secret="whsec_test"))


class TestFeeSplit:

    def test_no_connected_account_means_no_split(self, adapter):
        assert adapter.fee_split(3085, KioskSettings()) is None

    def test_connected_account_gets_all_but_kiosk_fee(self, adapter):
        split = adapter.fee_split(3085, KioskSettings(kiosk_fee=3.00, stripe_connected_account_id="acct_1"))
        assert split.application_fee_minor == 300
        assert split.destination == "acct_1"

    def test_fee_never_exceeds_amount(self, adapter):
        split = adapter.fee_split(200, KioskSettings(kiosk_fee=3.00, stripe_connected_account_id="acct_1"))
        assert split.application_fee_minor == 200


class TestStripeAdapter:

    def test_create_charge_without_connected_account(self, adapter):
        with patch.object(stripe.PaymentIntent, "create", return_value=fake_intent()) as create:
            handle = adapter.create_charge(3085, "usd", KioskSettings())

        kwargs = create.call_args.kwargs
        assert kwargs["amount"] == 3085
        assert kwargs["currency"] == "usd"
        assert kwargs["api_key"] == "sk_test_123"
        assert kwargs["automatic_payment_methods"]["enabled"] is True
        assert "application_fee_amount" not in kwargs
        assert "transfer_data" not in kwargs
        assert handle.client_handle == "pi_123_secret_abc"
        assert handle.settlement_id == "pi_123"

    def test_create_charge_with_connected_account_splits(self, adapter):
        settings = KioskSettings(kiosk_fee=2.50, stripe_connected_account_id="acct_9")
        with patch.object(stripe.PaymentIntent, "create", return_value=fake_intent()) as create:
            adapter.create_charge(3085, "usd", settings)

        kwargs = create.call_args.kwargs
        assert kwargs["application_fee_amount"] == 250
        assert kwargs["transfer_data"] == {"destination": "acct_9"}

    def test_stripe_error_becomes_payment_error(self, adapter):
        with patch.object(stripe.PaymentIntent, "create", side_effect=stripe.StripeError("card declined")):
            with pytest.raises(PaymentError) as exc:
                adapter.create_charge(3085, "usd", KioskSettings())
        assert exc.value.message == "Payment processing failed"

    def test_complete_charge_confirms_intent(self, adapter):
        handle = ChargeHandle(amount_minor=3085, currency="usd", settlement_id="pi_123")
        with patch.object(stripe.PaymentIntent, "confirm", return_value=fake_intent(status="succeeded")) as confirm:
            result = adapter.complete_charge(handle, "pm_card_visa", KioskSettings())

        assert confirm.call_args.args == ("pi_123",)
        assert confirm.call_args.kwargs["payment_method"] == "pm_card_visa"
        assert result.settlement_id == "pi_123"
        assert result.succeeded

    def test_complete_charge_requires_succeeded_status(self, adapter):
        handle = ChargeHandle(amount_minor=3085, currency="usd", settlement_id="pi_123")
        with patch.object(stripe.PaymentIntent, "confirm", return_value=fake_intent(status="requires_action")):
            with pytest.raises(PaymentError):
                adapter.complete_charge(handle, "pm_card_visa", KioskSettings())


# =============================================================================
# Routes
# =============================================================================

def test_create_payment_intent_route(client):
    with patch.object(stripe.PaymentIntent, "create", return_value=fake_intent()) as create:
        resp = client.post("/api/create-payment-intent", json={"amount": 30.85})

    assert resp.status_code == 200
    assert resp.json() == {"clientSecret": "pi_123_secret_abc", "paymentIntentId": "pi_123"}
    assert create.call_args.kwargs["amount"] == 3085


def test_create_payment_intent_uses_connected_account(client, admin_headers):
    client.put("/api/admin/settings/stripe_connected_account_id", json={"value": "acct_1"}, headers=admin_headers)
    client.put("/api/admin/settings/kiosk_fee", json={"value": "3.00"}, headers=admin_headers)

    with patch.object(stripe.PaymentIntent, "create", return_value=fake_intent()) as create:
        client.post("/api/create-payment-intent", json={"amount": 30.85, "currency": "usd"})

    assert create.call_args.kwargs["application_fee_amount"] == 300
    assert create.call_args.kwargs["transfer_data"] == {"destination": "acct_1"}


def test_create_payment_intent_failure_returns_500(client):
    with patch.object(stripe.PaymentIntent, "create", side_effect=stripe.StripeError("boom")):
        resp = client.post("/api/create-payment-intent", json={"amount": 30.85})
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Payment processing failed"}


def test_create_payment_intent_rejects_non_positive_amount(client):
    assert client.post("/api/create-payment-intent", json={"amount": 0}).status_code == 422


def test_stripe_connect_creates_and_stores_account(client, admin_headers):
    with patch.object(stripe.Account, "create", return_value=SimpleNamespace(id="acct_new")) as create_account, \
            patch.object(stripe.AccountLink, "create", return_value=SimpleNamespace(url="https://connect.stripe.com/x")):
        resp = client.post(
            "/api/admin/stripe/connect",
            json={"return_url": "https://kiosk.example.com/admin"},
            headers=admin_headers,
        )

    assert resp.status_code == 200
    assert resp.json() == {"url": "https://connect.stripe.com/x", "accountId": "acct_new"}
    assert create_account.call_args.kwargs["type"] == "express"

    settings = client.get("/api/admin/settings", headers=admin_headers).json()
    assert settings["stripe_connected_account_id"] == "acct_new"


def test_stripe_connect_reuses_existing_account(client, admin_headers):
    client.put("/api/admin/settings/stripe_connected_account_id", json={"value": "acct_old"}, headers=admin_headers)
    with patch.object(stripe.Account, "create") as create_account, \
            patch.object(stripe.AccountLink, "create", return_value=SimpleNamespace(url="https://connect.stripe.com/y")) as create_link:
        resp = client.post("/api/admin/stripe/connect", json={"return_url": "https://r"}, headers=admin_headers)

    assert resp.json()["accountId"] == "acct_old"
    create_account.assert_not_called()
    assert create_link.call_args.kwargs["account"] == "acct_old"


def test_stripe_status_not_connected(client, admin_headers):
    resp = client.get("/api/admin/stripe/status", headers=admin_headers)
    assert resp.json() == {"connected": False}


def test_stripe_status_connected(client, admin_headers):
    client.put("/api/admin/settings/stripe_connected_account_id", json={"value": "acct_1"}, headers=admin_headers)
    account = SimpleNamespace(id="acct_1", charges_enabled=True, payouts_enabled=False, details_submitted=True)
    with patch.object(stripe.Account, "retrieve", return_value=account):
        resp = client.get("/api/admin/stripe/status", headers=admin_headers)

    assert resp.json() == {
        "connected": True,
        "accountId": "acct_1",
        "chargesEnabled": True,
        "payoutsEnabled": False,
        "detailsSubmitted": True,
    }


def test_square_routes_not_mounted_for_stripe(client):
    assert client.get("/api/square/config").status_code == 404


# =============================================================================
# Webhooks
# =============================================================================

def test_webhook_without_secret_is_acknowledged(client):
    resp = client.post("/api/webhooks/stripe", content=b"{}")
    assert resp.json() == {"received": True}


def test_webhook_with_valid_signature(client, stripe_adapter, monkeypatch):
    monkeypatch.setattr(stripe_adapter, "config", StripeConfig(secret_key="sk_test_123", webhook_secret="whsec_test"))
    event = {"type": "payment_intent.succeeded", "data": {"object": {"id": "pi_123"}}}
    with patch.object(stripe.Webhook, "construct_event", return_value=event) as construct:
        resp = client.post("/api/webhooks/stripe", content=b'{"id": "evt_1"}', headers={"Stripe-Signature": "t=1,v1=abc"})

    assert resp.status_code == 200
    assert resp.json() == {"received": True}
    assert construct.call_args.args == (b'{"id": "evt_1"}', "t=1,v1=abc", "whsec_test")


def test_webhook_with_bad_signature_returns_400(client, stripe_adapter, monkeypatch):
    monkeypatch.setattr(stripe_adapter, "config", StripeConfig(secret_key="sk_test_123", webhook_secret="whsec_test"))
    error = stripe.SignatureVerificationError("bad signature", "t=1,v1=abc")
    with patch.object(stripe.Webhook, "construct_event", side_effect=error):
        resp = client.post("/api/webhooks/stripe", content=b"{}", headers={"Stripe-Signature": "t=1,v1=abc"})

    assert resp.status_code == 400


def test_webhook_without_signature_header_returns_400(client, stripe_adapter, monkeypatch):
    monkeypatch.setattr(stripe_adapter, "config", StripeConfig(secret_key="sk_test_123", webhook_secret="whsec_test"))
    resp = client.post("/api/webhooks/stripe", content=b"{}")
    assert resp.status_code == 400


def test_stored_non_finite_fee_falls_back_to_default(client, db_session):
    upsert_setting(db_session, KIOSK_FEE, "nan")
    upsert_setting(db_session, STRIPE_CONNECTED_ACCOUNT_ID, "acct_1")

    with patch.object(stripe.PaymentIntent, "create", return_value=fake_intent()) as create:
        resp = client.post("/api/create-payment-intent", json={"amount": 10})

    assert resp.status_code == 200
    assert create.call_args.kwargs["application_fee_amount"] == 300
