"""Owner dashboard statistics with short-lived per-user memoization.

"Monthly" revenue is a rolling window of 30x24h ending at computation time,
not the current calendar month.
"""

import logging
from collections import Counter
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from rentmarket.app.core.cache import StatsCache, stats_cache
from rentmarket.app.core.settings import get_settings
from rentmarket.app.core.time import ensure_utc, utc_now
from rentmarket.app.models.invoice import Invoice
from rentmarket.app.models.payment import Payment
from rentmarket.app.models.product import Product
from rentmarket.app.models.rental_request import RentalRequest

logger = logging.getLogger(__name__)

DASHBOARD_TAG = "dashboard"
MONTHLY_WINDOW = timedelta(days=30)


def _money(value: Decimal) -> float:
    return float(value.quantize(Decimal("0.01")))


def compute_dashboard_stats(db: Session, user_id: int, now: datetime | None = None) -> dict:
    now = now or utc_now()
    window_start = now - MONTHLY_WINDOW

    products = db.query(Product.id, Product.status).filter(Product.user_id == user_id).all()
    product_ids = [p.id for p in products]
    product_status_counts = Counter(p.status for p in products)

    request_statuses = []
    completed_payments = []
    if product_ids:
        request_statuses = [
            row.status
            for row in db.query(RentalRequest.status).filter(RentalRequest.product_id.in_(product_ids)).all()
        ]
        completed_payments = (
            db.query(Payment.amount, Payment.payment_date)
            .join(RentalRequest, Payment.rental_request_id == RentalRequest.id)
            .filter(RentalRequest.product_id.in_(product_ids), Payment.payment_status == "completed")
            .all()
        )
    request_status_counts = Counter(request_statuses)

    total_revenue = Decimal("0.00")
    monthly_revenue = Decimal("0.00")
    for payment in completed_payments:
        amount = Decimal(str(payment.amount or 0))
        total_revenue += amount
        paid_at = ensure_utc(payment.payment_date)
        if paid_at is not None and paid_at >= window_start:
            monthly_revenue += amount

    return {
        "total_products": len(products),
        "available_products": product_status_counts["available"],
        "rented_products": product_status_counts["rented"],
        "pending_requests": request_status_counts["pending"],
        "active_requests": request_status_counts["active"],
        "completed_requests": request_status_counts["completed"],
        "total_revenue": _money(total_revenue),
        "monthly_revenue": _money(monthly_revenue),
        "total_requests": len(request_statuses),
    }


def compute_download_stats(db: Session, user_id: int) -> dict:
    total_invoices = (
        db.query(func.count(Invoice.id))
        .join(RentalRequest, Invoice.rental_request_id == RentalRequest.id)
        .join(Product, RentalRequest.product_id == Product.id)
        .filter(Product.user_id == user_id)
        .scalar()
    )
    # Download events are not recorded yet, only the invoice total is real
    return {
        "total_invoices": total_invoices or 0,
        "downloaded_invoices": 0,
        "pdf_downloads": 0,
        "excel_downloads": 0,
        "csv_downloads": 0,
    }


def get_dashboard_stats(db: Session, user_id: int, cache: StatsCache = stats_cache) -> dict:
    return cache.get_or_compute(
        f"dashboard-stats:{user_id}",
        get_settings().stats_cache_ttl_seconds,
        lambda: compute_dashboard_stats(db, user_id),
        tags=(DASHBOARD_TAG,),
    )


def get_download_stats(db: Session, user_id: int, cache: StatsCache = stats_cache) -> dict:
    return cache.get_or_compute(
        f"dashboard-download-stats:{user_id}",
        get_settings().stats_cache_ttl_seconds,
        lambda: compute_download_stats(db, user_id),
        tags=(DASHBOARD_TAG,),
    )


def invalidate_dashboard(cache: StatsCache = stats_cache) -> int:
    return cache.invalidate(DASHBOARD_TAG)
