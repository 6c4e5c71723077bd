from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from rentmarket.app.core.cache import StatsCache, stats_cache
from rentmarket.app.db.base import Base
from rentmarket.app.db.session import SessionLocal, engine
from rentmarket.app.models.invoice import Invoice
from rentmarket.app.models.payment import Payment
from rentmarket.app.models.product import Product
from rentmarket.app.models.rental_request import RentalRequest
from rentmarket.app.models.user import User
from rentmarket.app.services.dashboard_stats import (
    compute_dashboard_stats,
    compute_download_stats,
    get_dashboard_stats,
    invalidate_dashboard,
)

NOW = datetime(2030, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    stats_cache.clear()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def make_user(db, email: str) -> User:
    user = User(name=email.split("@")[0], email=email, hashed_password="x")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_product(db, owner: User, status: str = "available", price: str = "25.00") -> Product:
    product = Product(
        user_id=owner.id,
        title=f"Item {status}",
        category="tools",
        rental_price=Decimal(price),
        location="Berlin",
        status=status,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def make_request(db, product: Product, customer: User, status: str = "pending", price: str = "50.00") -> RentalRequest:
    rental_request = RentalRequest(
        product_id=product.id,
        customer_id=customer.id,
        start_date=NOW,
        end_date=NOW + timedelta(days=2),
        status=status,
        price=Decimal(price),
        rental_period=2,
        pickup_location="Berlin",
        return_location="Berlin",
    )
    db.add(rental_request)
    db.commit()
    db.refresh(rental_request)
    return rental_request


def make_payment(db, rental_request: RentalRequest, amount: str, status: str = "completed", payment_date=None) -> Payment:
    payment = Payment(
        rental_request_id=rental_request.id,
        payment_method="card",
        amount=Decimal(amount),
        payment_status=status,
        payment_date=payment_date,
    )
    db.add(payment)
    db.commit()
    return payment


def test_user_without_products_gets_all_zeros(db):
    owner = make_user(db, "empty@example.com")
    stats = compute_dashboard_stats(db, owner.id, now=NOW)
    assert stats == {
        "total_products": 0,
        "available_products": 0,
        "rented_products": 0,
        "pending_requests": 0,
        "active_requests": 0,
        "completed_requests": 0,
        "total_revenue": 0.0,
        "monthly_revenue": 0.0,
        "total_requests": 0,
    }


def test_counts_products_and_requests_by_status(db):
    owner = make_user(db, "owner@example.com")
    customer = make_user(db, "customer@example.com")
    available = make_product(db, owner, "available")
    rented = make_product(db, owner, "rented")
    make_product(db, owner, "unavailable")

    make_request(db, available, customer, "pending")
    make_request(db, available, customer, "pending")
    make_request(db, rented, customer, "active")
    make_request(db, rented, customer, "completed")
    make_request(db, rented, customer, "rejected")

    stats = compute_dashboard_stats(db, owner.id, now=NOW)
    assert stats["total_products"] == 3
    assert stats["available_products"] == 1
    assert stats["rented_products"] == 1
    assert stats["pending_requests"] == 2
    assert stats["active_requests"] == 1
    assert stats["completed_requests"] == 1
    assert stats["total_requests"] == 5


def test_revenue_uses_completed_payments_and_rolling_30_day_window(db):
    owner = make_user(db, "owner@example.com")
    customer = make_user(db, "customer@example.com")
    product = make_product(db, owner, "rented")

    recent = make_request(db, product, customer, "completed")
    make_payment(db, recent, "100.00", payment_date=NOW - timedelta(days=10))
    old = make_request(db, product, customer, "completed")
    make_payment(db, old, "40.50", payment_date=NOW - timedelta(days=31))
    undated = make_request(db, product, customer, "completed")
    make_payment(db, undated, "9.50", payment_date=None)
    pending = make_request(db, product, customer, "accepted")
    make_payment(db, pending, "500.00", status="pending", payment_date=NOW)
    refunded = make_request(db, product, customer, "cancelled")
    make_payment(db, refunded, "70.00", status="refunded", payment_date=NOW)

    stats = compute_dashboard_stats(db, owner.id, now=NOW)
    assert stats["total_revenue"] == 150.0
    assert stats["monthly_revenue"] == 100.0
    assert stats["total_revenue"] >= stats["monthly_revenue"]


def test_monthly_window_is_not_calendar_month(db):
    owner = make_user(db, "owner@example.com")
    customer = make_user(db, "customer@example.com")
    product = make_product(db, owner, "rented")
    # Previous calendar month, but inside the trailing 30 days
    last_month = make_request(db, product, customer, "completed")
    make_payment(db, last_month, "60.00", payment_date=datetime(2030, 5, 20, tzinfo=timezone.utc))

    stats = compute_dashboard_stats(db, owner.id, now=NOW)
    assert stats["monthly_revenue"] == 60.0


def test_only_counts_the_callers_products(db):
    owner = make_user(db, "owner@example.com")
    other = make_user(db, "other@example.com")
    customer = make_user(db, "customer@example.com")
    mine = make_product(db, owner)
    theirs = make_product(db, other)
    make_request(db, theirs, customer, "pending")
    paid = make_request(db, theirs, customer, "completed")
    make_payment(db, paid, "80.00", payment_date=NOW)
    make_request(db, mine, customer, "pending")

    stats = compute_dashboard_stats(db, owner.id, now=NOW)
    assert stats["total_products"] == 1
    assert stats["total_requests"] == 1
    assert stats["total_revenue"] == 0.0


def test_download_stats_counts_invoices_for_owned_products(db):
    owner = make_user(db, "owner@example.com")
    customer = make_user(db, "customer@example.com")
    product = make_product(db, owner)
    for index in range(2):
        rental_request = make_request(db, product, customer, "completed")
        db.add(
            Invoice(
                rental_request_id=rental_request.id,
                invoice_number=f"INV-{index}",
                amount=Decimal("55.00"),
                subtotal=Decimal("50.00"),
                tax_rate=Decimal("0.1"),
                tax_amount=Decimal("5.00"),
                due_date=NOW,
            )
        )
    db.commit()

    stats = compute_download_stats(db, owner.id)
    assert stats["total_invoices"] == 2
    assert stats["downloaded_invoices"] == 0
    assert compute_download_stats(db, customer.id)["total_invoices"] == 0


def test_cached_stats_are_reused_until_invalidated(db):
    cache = StatsCache()
    owner = make_user(db, "owner@example.com")
    make_product(db, owner)

    assert get_dashboard_stats(db, owner.id, cache=cache)["total_products"] == 1
    make_product(db, owner)
    assert get_dashboard_stats(db, owner.id, cache=cache)["total_products"] == 1

    assert invalidate_dashboard(cache=cache) == 1
    assert get_dashboard_stats(db, owner.id, cache=cache)["total_products"] == 2
