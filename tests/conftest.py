import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import kiosk_api.config as config_mod
import kiosk_api.db as db
from kiosk_api.app_factory import create_app
from kiosk_api.config import SquareConfig, StripeConfig
from kiosk_api.models import Base, MenuCategory, MenuItem
from kiosk_api.payments.square_adapter import SquarePaymentAdapter
from kiosk_api.payments.stripe_adapter import StripePaymentAdapter
from kiosk_api.services.email_service import EmailError
from kiosk_api.services.printing import PrintError

# Test admin secret
TEST_ADMIN_PASSWORD = "testpassword123"


# =============================================================================
# Fakes for the service objects stored on app.state
# =============================================================================

class RecordingSink:
    """NotificationSink that keeps every result for assertions."""

    def __init__(self):
        self.results = []

    def record(self, result):
        self.results.append(result)

    def by_effect(self, effect):
        return [r for r in self.results if r.effect == effect]


class FakePrinter:
    def __init__(self, fail=False):
        self.fail = fail
        self.jobs = []
        self.printers = [{"id": 70001, "name": "Kitchen", "description": "Star TSP100"}]

    def send_print_job(self, receipt, printer, title="Order Receipt"):
        if self.fail:
            raise PrintError("printer offline")
        self.jobs.append({"receipt": receipt, "printer": printer, "title": title})
        return 4242

    def list_printers(self, api_key):
        if self.fail:
            raise PrintError("bad api key")
        return self.printers


class FakeEmailer:
    def __init__(self, enabled=True, fail=False):
        self.enabled = enabled
        self.fail = fail
        self.sent = []

    def send_order_notification(self, order, tax_rate):
        if self.fail:
            raise EmailError("resend down")
        self.sent.append(order)
        return {"status": "sent", "id": "email_1"}


# =============================================================================
# Database
# =============================================================================

@pytest.fixture
def session_factory(monkeypatch):
    """In-memory SQLite shared through StaticPool, patched into kiosk_api.db."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    monkeypatch.setattr(db, "engine", engine)
    monkeypatch.setattr(db, "SessionLocal", TestingSessionLocal)

    Base.metadata.create_all(bind=engine)
    yield TestingSessionLocal
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded_menu(db_session):
    """
    Two visible categories plus one whose only item is unavailable.

    Sort orders are deliberately not in insertion order.
    """
    entrees = MenuCategory(name="Entrees", sort_order=2)
    appetizers = MenuCategory(name="Appetizers", sort_order=1)
    drinks = MenuCategory(name="Drinks", sort_order=3)
    db_session.add_all([entrees, appetizers, drinks])
    db_session.flush()

    db_session.add_all([
        MenuItem(category_id=appetizers.id, name="Buffalo Wings", price=10.99,
                 description="Six wings", sort_order=2),
        MenuItem(category_id=appetizers.id, name="Mozzarella Sticks", price=8.49, sort_order=1),
        MenuItem(category_id=appetizers.id, name="Nachos", price=9.99, available=False, sort_order=0),
        MenuItem(category_id=entrees.id, name="Classic Burger", price=13.99, sort_order=0),
        MenuItem(category_id=drinks.id, name="Fountain Soda", price=2.99, available=False, sort_order=0),
    ])
    db_session.commit()
    return {"entrees": entrees.id, "appetizers": appetizers.id, "drinks": drinks.id}


# =============================================================================
# Application
# =============================================================================

@pytest.fixture
def admin_password(monkeypatch):
    monkeypatch.setattr(config_mod, "ADMIN_PASSWORD", TEST_ADMIN_PASSWORD)
    return TEST_ADMIN_PASSWORD


@pytest.fixture
def admin_headers(admin_password):
    """Header that authenticates admin endpoints."""
    return {"X-Admin-Password": admin_password}


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def printer():
    return FakePrinter()


@pytest.fixture
def emailer():
    return FakeEmailer()


@pytest.fixture
def stripe_adapter():
    return StripePaymentAdapter(StripeConfig(secret_key="sk_test_123", webhook_secret=None))


@pytest.fixture
def square_adapter():
    return SquarePaymentAdapter(SquareConfig(
        application_id="sq0idp-app",
        application_secret="sq0csp-secret",
        access_token="EAAA-platform",
        location_id="L-PLATFORM",
        environment="sandbox",
        redirect_url="https://kiosk.example.com/api/admin/square/callback",
    ))


def _build_client(session_factory, adapter, printer, emailer, sink):
    app = create_app(payment_adapter=adapter, printer=printer, emailer=emailer, sink=sink)

    def override_get_db():
        db_sess = session_factory()
        try:
            yield db_sess
        finally:
            db_sess.close()

    app.dependency_overrides[db.get_db] = override_get_db
    app.dependency_overrides[db.get_optional_db] = override_get_db
    return app


@pytest.fixture
def client(session_factory, stripe_adapter, printer, emailer, sink, admin_password):
    """TestClient for a Stripe kiosk backed by the in-memory database."""
    app = _build_client(session_factory, stripe_adapter, printer, emailer, sink)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def square_client(session_factory, square_adapter, printer, emailer, sink, admin_password):
    """TestClient for a Square kiosk backed by the in-memory database."""
    app = _build_client(session_factory, square_adapter, printer, emailer, sink)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def no_db_client(monkeypatch, stripe_adapter, printer, emailer, sink, admin_password):
    """TestClient for a kiosk running without DATABASE_URL."""
    monkeypatch.setattr(db, "engine", None)
    monkeypatch.setattr(db, "SessionLocal", None)
    app = create_app(payment_adapter=stripe_adapter, printer=printer, emailer=emailer, sink=sink)
    with TestClient(app) as test_client:
        yield test_client
