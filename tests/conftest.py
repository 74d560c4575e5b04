import hashlib
import hmac
import json
import os
import time
from typing import Any, Dict, Generator

import pytest
import stripe
from fastapi.testclient import TestClient

os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

from backend.app_setup.factory import create_app
from backend.config import PaymentSettings
from backend.payments.stripe_client import StripeGateway
from backend.utils.security import require_user

WEBHOOK_SECRET = "whsec_test_secret"
FRONTEND_URL = "http://front.test"

TEST_USER: Dict[str, Any] = {"id": "user-1", "email": "test@example.com", "token": "fake-token"}
OWNER_USER: Dict[str, Any] = {"id": "owner-1", "email": "owner@example.com", "token": "owner-token"}

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/tests/unit/" in nodeid or nodeid.startswith("tests/unit/"):
            item.add_marker(pytest.mark.unit)
        elif "/tests/integration/" in nodeid or nodeid.startswith("tests/integration/"):
            item.add_marker(pytest.mark.integration)

def sign_payload(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    """En-tête Stripe-Signature valide (schéma v1 HMAC-SHA256)."""
    ts = timestamp or int(time.time())
    signed = f"{ts}.{payload.decode('utf-8')}".encode("utf-8")
    sig = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={ts},v1={sig}"

def completed_event(order_id: str | None, amount_total: int | None = 34000, event_type: str = "checkout.session.completed") -> bytes:
    session: Dict[str, Any] = {"id": "cs_test_123", "object": "checkout.session", "metadata": {}}
    if order_id is not None:
        session["metadata"] = {"orderId": order_id, "restaurantId": "resto-1"}
    if amount_total is not None:
        session["amount_total"] = amount_total
    return json.dumps({"id": "evt_1", "type": event_type, "data": {"object": session}}).encode("utf-8")

@pytest.fixture()
def payment_settings() -> PaymentSettings:
    return PaymentSettings(
        secret_key="sk_test_123",
        webhook_secret=WEBHOOK_SECRET,
        currency="inr",
        frontend_url=FRONTEND_URL,
    )

@pytest.fixture()
def gateway(payment_settings) -> StripeGateway:
    return StripeGateway(payment_settings)

@pytest.fixture()
def app(gateway):
    application = create_app()
    application.state.payment_gateway = gateway
    application.dependency_overrides[require_user] = lambda: TEST_USER
    yield application
    application.dependency_overrides.clear()

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

@pytest.fixture()
def as_owner(app):
    app.dependency_overrides[require_user] = lambda: OWNER_USER
    yield OWNER_USER
    app.dependency_overrides[require_user] = lambda: TEST_USER

@pytest.fixture()
def restaurant_row() -> Dict[str, Any]:
    return {
        "id": "resto-1",
        "user_id": OWNER_USER["id"],
        "restaurant_name": "Spice Route",
        "city": "Pune",
        "country": "India",
        "delivery_price": 40.0,
        "estimated_delivery_time": 30,
        "cuisines": ["Indian", "Biryani"],
        "menu_items": [
            {"id": "M1", "name": "Paneer Tikka", "price": 150.0},
            {"id": "M2", "name": "Masala Dosa", "price": 19.99},
        ],
        "image_url": "https://cdn.test/r.png",
        "last_updated": "2026-01-01T00:00:00+00:00",
    }

class FakeStore:
    """Tables restaurants/orders en mémoire, mêmes sémantiques que les repositories Supabase."""

    def __init__(self):
        self.restaurants: Dict[str, Dict[str, Any]] = {}
        self.orders: Dict[str, Dict[str, Any]] = {}
        self.order_writes = 0
        self.fail_insert = False

    # restaurants
    def get_restaurant(self, restaurant_id):
        row = self.restaurants.get(str(restaurant_id))
        return dict(row) if row else None

    def get_restaurant_by_owner(self, user_id):
        for row in self.restaurants.values():
            if row.get("user_id") == user_id:
                return dict(row)
        return None

    # orders
    def insert_order(self, order):
        if self.fail_insert:
            return None
        self.orders[order["id"]] = dict(order)
        self.order_writes += 1
        return dict(order)

    def get_order(self, order_id):
        row = self.orders.get(str(order_id))
        return dict(row) if row else None

    def mark_order_paid(self, order_id, total_amount):
        row = self.orders.get(str(order_id))
        if not row or row["status"] != "placed":
            return None
        row.update({"status": "paid", "total_amount": total_amount})
        self.order_writes += 1
        return dict(row)

    def update_order_status(self, order_id, expected_status, new_status):
        row = self.orders.get(str(order_id))
        if not row or row["status"] != expected_status:
            return None
        row["status"] = new_status
        self.order_writes += 1
        return dict(row)

    def list_orders_for_user(self, user_id):
        rows = []
        for row in self.orders.values():
            if row["user_id"] == user_id:
                rows.append({**row, "restaurants": self.restaurants.get(row["restaurant_id"])})
        return rows

    def list_orders_for_restaurant(self, restaurant_id):
        return [dict(r) for r in self.orders.values() if r["restaurant_id"] == restaurant_id]

@pytest.fixture()
def store(monkeypatch, restaurant_row) -> FakeStore:
    fake = FakeStore()
    fake.restaurants[restaurant_row["id"]] = dict(restaurant_row)
    for name in ("get_restaurant", "get_restaurant_by_owner"):
        monkeypatch.setattr(f"backend.restaurants.repository.{name}", getattr(fake, name))
    for name in (
        "insert_order",
        "get_order",
        "mark_order_paid",
        "update_order_status",
        "list_orders_for_user",
        "list_orders_for_restaurant",
    ):
        monkeypatch.setattr(f"backend.orders.repository.{name}", getattr(fake, name))
    return fake

@pytest.fixture()
def placed_order(store) -> Dict[str, Any]:
    order = {
        "id": "order-1",
        "restaurant_id": "resto-1",
        "user_id": TEST_USER["id"],
        "status": "placed",
        "cart_items": [{"menuItemId": "M1", "name": "Paneer Tikka", "quantity": 2}],
        "delivery_details": {"email": "test@example.com", "name": "Asha", "addressLineOne": "1 MG Road", "city": "Pune"},
        "total_amount": None,
        "created_at": "2026-01-02T10:00:00+00:00",
    }
    store.orders[order["id"]] = dict(order)
    return order

@pytest.fixture()
def fake_stripe_session(monkeypatch):
    """Remplace stripe.checkout.Session.create et enregistre les arguments reçus.
    Retourne un vrai stripe.checkout.Session (pas un dict), comme le SDK."""
    calls: Dict[str, Any] = {"create": [], "expire": [], "response": {"id": "cs_test_123", "url": "https://checkout.stripe.test/cs_test_123"}}

    def _create(**kwargs):
        calls["create"].append(kwargs)
        return stripe.checkout.Session.construct_from(dict(calls["response"]), "sk_test")

    def _expire(session_id, **kwargs):
        calls["expire"].append(session_id)
        return {"id": session_id, "status": "expired"}

    monkeypatch.setattr("stripe.checkout.Session.create", _create)
    monkeypatch.setattr("stripe.checkout.Session.expire", _expire)
    return calls

@pytest.fixture()
def sign():
    return sign_payload

@pytest.fixture()
def make_event():
    return completed_event
