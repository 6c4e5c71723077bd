from datetime import timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from rentmarket.app.core.cache import stats_cache
from rentmarket.app.core.time import utc_now
from rentmarket.app.db.base import Base
from rentmarket.app.db.session import SessionLocal, engine, get_db
from rentmarket.app.main import app
from rentmarket.app.models.payment import Payment
from rentmarket.app.models.product import Product
from rentmarket.app.models.rental_request import RentalRequest
from rentmarket.app.services import dashboard_stats


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    stats_cache.clear()
    yield
    Base.metadata.drop_all(bind=engine)


def signup_and_login(client: TestClient, email: str, password: str = "secret123") -> tuple[str, int]:
    client.post("/api/auth/signup", json={"name": "Test User", "email": email, "password": password})
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    data = resp.json()["data"]
    return data["token"], data["user"]["id"]


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def create_product(client: TestClient, token: str, title: str = "Camera", price: float = 20.0) -> dict:
    resp = client.post(
        "/api/products",
        json={"title": title, "category": "electronics", "rental_price": price, "location": "Berlin"},
        headers=auth(token),
    )
    assert resp.status_code == 201
    return resp.json()["data"]


def create_rental_request(client: TestClient, token: str, product_id: int, days: int = 2) -> dict:
    start = utc_now() + timedelta(days=1)
    resp = client.post(
        "/api/rental-requests",
        json={
            "product_id": product_id,
            "start_date": start.isoformat(),
            "end_date": (start + timedelta(days=days)).isoformat(),
            "pickup_location": "Berlin",
            "return_location": "Berlin",
        },
        headers=auth(token),
    )
    assert resp.status_code == 201
    return resp.json()["data"]


def add_pending_payment(rental_request_id: int, amount: str) -> int:
    db = SessionLocal()
    try:
        payment = Payment(rental_request_id=rental_request_id, payment_method="card", amount=Decimal(amount))
        db.add(payment)
        db.commit()
        return payment.id
    finally:
        db.close()


def test_stats_requires_authorization_header():
    client = TestClient(app)
    resp = client.get("/api/dashboard/stats")
    assert resp.status_code == 401
    assert resp.json() == {"success": False, "message": "Authentication required"}


def test_stats_rejects_invalid_token():
    client = TestClient(app)
    resp = client.get("/api/dashboard/stats", headers=auth("not-a-jwt"))
    assert resp.status_code == 401
    assert resp.json() == {"success": False, "message": "Invalid token"}


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/api/dashboard/stats"),
        ("get", "/api/dashboard/download-stats"),
        ("get", "/api/notifications"),
        ("patch", "/api/notifications/mark-read"),
    ],
)
def test_unauthenticated_requests_never_open_a_session(method, path):
    opened = []

    def tracking_get_db():
        opened.append(True)
        yield from get_db()

    app.dependency_overrides[get_db] = tracking_get_db
    try:
        client = TestClient(app)
        resp = getattr(client, method)(path)
    finally:
        app.dependency_overrides.pop(get_db, None)

    assert resp.status_code == 401
    assert opened == []


def test_stats_for_new_user_are_zero_and_camel_cased():
    client = TestClient(app)
    token, _ = signup_and_login(client, "owner@example.com")
    resp = client.get("/api/dashboard/stats", headers=auth(token))
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Dashboard statistics retrieved successfully"
    assert body["data"] == {
        "totalProducts": 0,
        "availableProducts": 0,
        "rentedProducts": 0,
        "pendingRequests": 0,
        "activeRequests": 0,
        "completedRequests": 0,
        "totalRevenue": 0.0,
        "monthlyRevenue": 0.0,
        "totalRequests": 0,
    }
    assert resp.headers["Cache-Control"] == "public, s-maxage=60, stale-while-revalidate=120"


def test_stats_are_cached_between_requests():
    client = TestClient(app)
    token, user_id = signup_and_login(client, "owner@example.com")
    assert client.get("/api/dashboard/stats", headers=auth(token)).json()["data"]["totalProducts"] == 0

    # Written behind the API, so nothing invalidates the cached figures
    db = SessionLocal()
    try:
        db.add(Product(user_id=user_id, title="Drill", category="tools", rental_price=Decimal("5.00"), location="Berlin"))
        db.commit()
    finally:
        db.close()
    assert client.get("/api/dashboard/stats", headers=auth(token)).json()["data"]["totalProducts"] == 0

    stats_cache.invalidate("dashboard")
    assert client.get("/api/dashboard/stats", headers=auth(token)).json()["data"]["totalProducts"] == 1


def test_completed_payment_refreshes_revenue():
    client = TestClient(app)
    owner_token, _ = signup_and_login(client, "owner@example.com")
    customer_token, _ = signup_and_login(client, "customer@example.com")
    product = create_product(client, owner_token, price=30.0)
    rental_request = create_rental_request(client, customer_token, product["id"])
    payment_id = add_pending_payment(rental_request["id"], "60.00")

    before = client.get("/api/dashboard/stats", headers=auth(owner_token)).json()["data"]
    assert before["pendingRequests"] == 1
    assert before["totalRevenue"] == 0.0

    resp = client.put(f"/api/payments/{payment_id}", json={"payment_status": "completed"}, headers=auth(owner_token))
    assert resp.status_code == 200

    after = client.get("/api/dashboard/stats", headers=auth(owner_token)).json()["data"]
    assert after["totalRevenue"] == 60.0
    assert after["monthlyRevenue"] == 60.0
    assert after["rentedProducts"] == 1
    assert after["pendingRequests"] == 0


def test_stats_store_failure_returns_generic_500(monkeypatch):
    client = TestClient(app)
    token, user_id = signup_and_login(client, "owner@example.com")

    def failing_compute(db, user_id, now=None):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    monkeypatch.setattr(dashboard_stats, "compute_dashboard_stats", failing_compute)
    resp = client.get("/api/dashboard/stats", headers=auth(token))
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Failed to retrieve dashboard statistics"}
    assert f"dashboard-stats:{user_id}" not in stats_cache


def test_download_stats_payload():
    client = TestClient(app)
    token, _ = signup_and_login(client, "owner@example.com")
    resp = client.get("/api/dashboard/download-stats", headers=auth(token))
    assert resp.status_code == 200
    assert resp.json()["data"] == {
        "totalInvoices": 0,
        "downloadedInvoices": 0,
        "pdfDownloads": 0,
        "excelDownloads": 0,
        "csvDownloads": 0,
    }
    assert "stale-while-revalidate" in resp.headers["Cache-Control"]


def test_new_rental_request_is_visible_on_owner_dashboard():
    client = TestClient(app)
    owner_token, _ = signup_and_login(client, "owner@example.com")
    customer_token, _ = signup_and_login(client, "customer@example.com")
    product = create_product(client, owner_token)
    client.get("/api/dashboard/stats", headers=auth(owner_token))

    create_rental_request(client, customer_token, product["id"])

    db = SessionLocal()
    try:
        assert db.query(RentalRequest).count() == 1
    finally:
        db.close()
    data = client.get("/api/dashboard/stats", headers=auth(owner_token)).json()["data"]
    assert data["totalRequests"] == 1
    assert data["pendingRequests"] == 1


def test_rental_lifecycle_drives_dashboard_counts():
    client = TestClient(app)
    owner_token, _ = signup_and_login(client, "owner@example.com")
    customer_token, _ = signup_and_login(client, "customer@example.com")
    product = create_product(client, owner_token, price=30.0)
    rental_request = create_rental_request(client, customer_token, product["id"])
    rental_path = f"/api/rental-requests/{rental_request['id']}"

    assert client.put(rental_path, json={"status": "accepted"}, headers=auth(owner_token)).status_code == 200
    payment = client.post(
        "/api/payments",
        json={"rental_request_id": rental_request["id"], "payment_method": "card"},
        headers=auth(customer_token),
    )
    assert payment.status_code == 201
    client.put(
        f"/api/payments/{payment.json()['data']['id']}", json={"payment_status": "completed"}, headers=auth(owner_token)
    )

    assert client.put(rental_path, json={"status": "active"}, headers=auth(owner_token)).status_code == 200
    data = client.get("/api/dashboard/stats", headers=auth(owner_token)).json()["data"]
    assert data["activeRequests"] == 1
    assert data["rentedProducts"] == 1
    assert data["totalRevenue"] == 60.0

    assert client.put(rental_path, json={"status": "completed"}, headers=auth(owner_token)).status_code == 200
    data = client.get("/api/dashboard/stats", headers=auth(owner_token)).json()["data"]
    assert data["activeRequests"] == 0
    assert data["completedRequests"] == 1
    assert data["availableProducts"] == 1
    assert data["rentedProducts"] == 0
