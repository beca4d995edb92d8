"""
Tests for the Square payment adapter and routes.

HTTP calls to Square are patched at the requests module used by the adapter.
"""
import json
from unittest.mock import patch
from urllib.parse import parse_qs, urlparse

import pytest
import requests

from kiosk_api.payments.base import PaymentError
from kiosk_api.services.settings_store import (
    SQUARE_MERCHANT_ACCESS_TOKEN,
    SQUARE_MERCHANT_ID,
    SQUARE_MERCHANT_LOCATION_ID,
    SQUARE_OAUTH_STATE,
    KioskSettings,
    get_setting,
    upsert_setting,
)

POST = "kiosk_api.payments.square_adapter.requests.post"
GET = "kiosk_api.payments.square_adapter.requests.get"

MERCHANT_SETTINGS = KioskSettings(
    kiosk_fee=3.00,
    square_merchant_id="M-REST",
    square_merchant_access_token="EAAA-merchant",
    square_merchant_location_id="L-REST",
)


def make_response(status_code=200, body=None):
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(body or {}).encode("utf-8")
    return response


def html_response(status_code, body=b"<html>Bad Gateway</html>"):
    response = requests.Response()
    response.status_code = status_code
    response._content = body
    return response


def payment_response(payment_id="sq_pay_1", status="COMPLETED"):
    return make_response(200, {"payment": {"id": payment_id, "status": status}})


class TestSquareAdapter:

    def test_platform_charge_has_no_app_fee(self, square_adapter):
        handle = square_adapter.create_charge(3085, "usd", KioskSettings())
        assert handle.split is None

        with patch(POST, return_value=payment_response()) as post:
            result = square_adapter.complete_charge(handle, "cnon:card-nonce-ok", KioskSettings())

        url = post.call_args.args[0]
        body = post.call_args.kwargs["json"]
        headers = post.call_args.kwargs["headers"]
        assert url == "https://connect.squareupsandbox.com/v2/payments"
        assert body["source_id"] == "cnon:card-nonce-ok"
        assert body["amount_money"] == {"amount": 3085, "currency": "USD"}
        assert body["location_id"] == "L-PLATFORM"
        assert "app_fee_money" not in body
        assert headers["Authorization"] == "Bearer EAAA-platform"
        assert result.settlement_id == "sq_pay_1"
        assert result.succeeded

    def test_connected_merchant_charge_takes_app_fee(self, square_adapter):
        handle = square_adapter.create_charge(3085, "USD", MERCHANT_SETTINGS)
        assert handle.split.application_fee_minor == 300
        assert handle.split.destination == "M-REST"

        with patch(POST, return_value=payment_response()) as post:
            square_adapter.complete_charge(handle, "cnon:ok", MERCHANT_SETTINGS)

        body = post.call_args.kwargs["json"]
        assert body["app_fee_money"] == {"amount": 300, "currency": "USD"}
        assert body["location_id"] == "L-REST"
        assert post.call_args.kwargs["headers"]["Authorization"] == "Bearer EAAA-merchant"

    def test_each_attempt_gets_new_idempotency_key(self, square_adapter):
        handle = square_adapter.create_charge(1000, "USD", KioskSettings())
        with patch(POST, return_value=payment_response()) as post:
            square_adapter.complete_charge(handle, "cnon:ok", KioskSettings())
            square_adapter.complete_charge(handle, "cnon:ok", KioskSettings())

        keys = [call.kwargs["json"]["idempotency_key"] for call in post.call_args_list]
        assert keys[0] != keys[1]

    def test_declined_card_raises_payment_error(self, square_adapter):
        handle = square_adapter.create_charge(1000, "USD", KioskSettings())
        declined = make_response(402, {"errors": [{"code": "CARD_DECLINED"}]})
        with patch(POST, return_value=declined):
            with pytest.raises(PaymentError):
                square_adapter.complete_charge(handle, "cnon:declined", KioskSettings())

    def test_network_error_raises_payment_error(self, square_adapter):
        handle = square_adapter.create_charge(1000, "USD", KioskSettings())
        with patch(POST, side_effect=requests.ConnectionError("down")):
            with pytest.raises(PaymentError):
                square_adapter.complete_charge(handle, "cnon:ok", KioskSettings())

    def test_unreadable_error_body_raises_payment_error(self, square_adapter):
        handle = square_adapter.create_charge(1000, "USD", KioskSettings())
        with patch(POST, return_value=html_response(502)):
            with pytest.raises(PaymentError):
                square_adapter.complete_charge(handle, "cnon:ok", KioskSettings())

    def test_unreadable_locations_body_raises_payment_error(self, square_adapter):
        with patch(GET, return_value=html_response(200, b"<html>ok</html>")):
            with pytest.raises(PaymentError):
                square_adapter.fetch_main_location("EAAA-new")

    def test_authorization_url(self, square_adapter):
        url = urlparse(square_adapter.authorization_url("state-123"))
        params = parse_qs(url.query)

        assert url.netloc == "connect.squareupsandbox.com"
        assert url.path == "/oauth2/authorize"
        assert params["client_id"] == ["sq0idp-app"]
        assert params["state"] == ["state-123"]
        assert params["session"] == ["false"]
        assert "PAYMENTS_WRITE" in params["scope"][0].split(" ")

    def test_exchange_code(self, square_adapter):
        token = make_response(200, {
            "access_token": "EAAA-new",
            "refresh_token": "EQAA-refresh",
            "merchant_id": "M-NEW",
        })
        with patch(POST, return_value=token) as post:
            credentials = square_adapter.exchange_code("code-1")

        assert post.call_args.args[0].endswith("/oauth2/token")
        assert post.call_args.kwargs["json"]["grant_type"] == "authorization_code"
        assert post.call_args.kwargs["json"]["client_secret"] == "sq0csp-secret"
        assert credentials == {
            "merchant_id": "M-NEW",
            "access_token": "EAAA-new",
            "refresh_token": "EQAA-refresh",
        }

    def test_fetch_main_location_skips_inactive(self, square_adapter):
        locations = make_response(200, {"locations": [
            {"id": "L-OLD", "status": "INACTIVE"},
            {"id": "L-MAIN", "status": "ACTIVE"},
        ]})
        with patch(GET, return_value=locations):
            assert square_adapter.fetch_main_location("EAAA-new") == "L-MAIN"

    def test_revoke_uses_client_authorization(self, square_adapter):
        with patch(POST, return_value=make_response(200, {"success": True})) as post:
            square_adapter.revoke("EAAA-merchant")

        assert post.call_args.args[0].endswith("/oauth2/revoke")
        assert post.call_args.kwargs["headers"]["Authorization"] == "Client sq0csp-secret"
        assert post.call_args.kwargs["json"]["access_token"] == "EAAA-merchant"


# =============================================================================
# Routes
# =============================================================================

def test_square_config_route(square_client):
    resp = square_client.get("/api/square/config")
    assert resp.json() == {
        "applicationId": "sq0idp-app",
        "locationId": "L-PLATFORM",
        "environment": "sandbox",
    }


def test_square_payment_route(square_client):
    with patch(POST, return_value=payment_response("sq_pay_7")) as post:
        resp = square_client.post("/api/square/payment", json={"sourceId": "cnon:ok", "amount": 30.85})

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "paymentId": "sq_pay_7", "status": "COMPLETED"}
    assert post.call_args.kwargs["json"]["amount_money"]["amount"] == 3085


def test_square_payment_failure_returns_500(square_client):
    with patch(POST, return_value=make_response(400, {"errors": [{"code": "GENERIC_DECLINE"}]})):
        resp = square_client.post("/api/square/payment", json={"sourceId": "cnon:bad", "amount": 10})
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Payment processing failed"}


def test_stripe_routes_not_mounted_for_square(square_client):
    assert square_client.post("/api/create-payment-intent", json={"amount": 1}).status_code == 404


def test_square_admin_routes_require_auth(square_client):
    assert square_client.get("/api/admin/square/auth-url").status_code == 401
    assert square_client.get("/api/admin/square/status").status_code == 401
    assert square_client.post("/api/admin/square/disconnect").status_code == 401


def test_oauth_flow_connects_merchant(square_client, admin_headers, db_session):
    resp = square_client.get("/api/admin/square/auth-url", headers=admin_headers)
    assert resp.status_code == 200
    state = parse_qs(urlparse(resp.json()["url"]).query)["state"][0]
    assert get_setting(db_session, SQUARE_OAUTH_STATE) == state

    token = make_response(200, {"access_token": "EAAA-new", "refresh_token": "EQAA-r", "merchant_id": "M-NEW"})
    locations = make_response(200, {"locations": [{"id": "L-NEW", "status": "ACTIVE"}]})
    with patch(POST, return_value=token), patch(GET, return_value=locations):
        resp = square_client.get(
            "/api/admin/square/callback",
            params={"code": "code-1", "state": state},
            follow_redirects=False,
        )

    assert resp.status_code == 302
    assert resp.headers["location"].endswith("?square=connected")

    db_session.expire_all()
    assert get_setting(db_session, SQUARE_OAUTH_STATE) is None
    assert get_setting(db_session, SQUARE_MERCHANT_ID) == "M-NEW"
    assert get_setting(db_session, SQUARE_MERCHANT_LOCATION_ID) == "L-NEW"

    status = square_client.get("/api/admin/square/status", headers=admin_headers).json()
    assert status == {"connected": True, "merchantId": "M-NEW", "locationId": "L-NEW"}


def test_oauth_callback_rejects_wrong_state(square_client, admin_headers, db_session):
    square_client.get("/api/admin/square/auth-url", headers=admin_headers)

    with patch(POST) as post:
        resp = square_client.get(
            "/api/admin/square/callback",
            params={"code": "code-1", "state": "forged"},
            follow_redirects=False,
        )

    assert resp.status_code == 400
    post.assert_not_called()
    assert get_setting(db_session, SQUARE_MERCHANT_ID) is None


def test_oauth_state_is_single_use(square_client, admin_headers):
    resp = square_client.get("/api/admin/square/auth-url", headers=admin_headers)
    state = parse_qs(urlparse(resp.json()["url"]).query)["state"][0]

    token = make_response(200, {"access_token": "EAAA-new", "refresh_token": "EQAA-r", "merchant_id": "M-NEW"})
    locations = make_response(200, {"locations": [{"id": "L-NEW"}]})
    with patch(POST, return_value=token), patch(GET, return_value=locations):
        first = square_client.get("/api/admin/square/callback", params={"code": "c", "state": state}, follow_redirects=False)
        second = square_client.get("/api/admin/square/callback", params={"code": "c", "state": state}, follow_redirects=False)

    assert first.status_code == 302
    assert second.status_code == 400


def test_disconnect_revokes_and_clears_merchant(square_client, admin_headers, db_session):
    upsert_setting(db_session, SQUARE_MERCHANT_ID, "M-REST")
    upsert_setting(db_session, SQUARE_MERCHANT_ACCESS_TOKEN, "EAAA-merchant")

    with patch(POST, return_value=make_response(200, {"success": True})) as post:
        resp = square_client.post("/api/admin/square/disconnect", headers=admin_headers)

    assert resp.json() == {"success": True}
    assert post.call_args.kwargs["json"]["access_token"] == "EAAA-merchant"
    assert square_client.get("/api/admin/square/status", headers=admin_headers).json() == {"connected": False}


def test_disconnect_clears_merchant_even_if_revoke_fails(square_client, admin_headers, db_session):
    upsert_setting(db_session, SQUARE_MERCHANT_ID, "M-REST")
    upsert_setting(db_session, SQUARE_MERCHANT_ACCESS_TOKEN, "EAAA-merchant")

    with patch(POST, side_effect=requests.ConnectionError("down")):
        resp = square_client.post("/api/admin/square/disconnect", headers=admin_headers)

    assert resp.status_code == 200
    db_session.expire_all()
    assert get_setting(db_session, SQUARE_MERCHANT_ACCESS_TOKEN) is None


def test_square_payment_gateway_page_returns_500(square_client):
    with patch(POST, return_value=html_response(502)):
        resp = square_client.post("/api/square/payment", json={"sourceId": "cnon:ok", "amount": 10})
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Payment processing failed"}


def test_disconnect_clears_merchant_when_revoke_gets_gateway_page(square_client, admin_headers, db_session):
    upsert_setting(db_session, SQUARE_MERCHANT_ID, "M1")
    upsert_setting(db_session, SQUARE_MERCHANT_ACCESS_TOKEN, "tok")

    with patch(POST, return_value=html_response(502)):
        resp = square_client.post("/api/admin/square/disconnect", headers=admin_headers)

    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    db_session.expire_all()
    assert get_setting(db_session, SQUARE_MERCHANT_ID) is None
    assert get_setting(db_session, SQUARE_MERCHANT_ACCESS_TOKEN) is None
