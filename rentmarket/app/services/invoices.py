"""Invoice issuing for rental requests."""

import logging
import secrets
from datetime import datetime
from decimal import Decimal

from sqlalchemy.orm import Session

from rentmarket.app.core.errors import ValidationError
from rentmarket.app.core.time import utc_now
from rentmarket.app.models.invoice import Invoice
from rentmarket.app.models.rental_request import RentalRequest
from rentmarket.app.services.dashboard_stats import invalidate_dashboard
from rentmarket.app.services.invoice_backfill import build_missing_items

logger = logging.getLogger(__name__)

DEFAULT_TAX_RATE = Decimal("0.1")
CENTS = Decimal("0.01")


def generate_invoice_number(now: datetime | None = None) -> str:
    """``INV-YYYYMMDD-NNNN`` with a random four digit suffix."""
    now = now or utc_now()
    return f"INV-{now:%Y%m%d}-{secrets.randbelow(10000):04d}"


def issue_invoice(
    db: Session,
    rental_request: RentalRequest,
    due_date: datetime,
    notes: str | None = None,
    tax_rate: Decimal = DEFAULT_TAX_RATE,
) -> Invoice:
    """Create a sent invoice with its rental fee and tax items in one commit."""
    if rental_request.invoice is not None:
        raise ValidationError("Invoice already exists for this rental request")

    subtotal = Decimal(str(rental_request.price)).quantize(CENTS)
    tax_amount = (subtotal * tax_rate).quantize(CENTS)
    invoice = Invoice(
        rental_request=rental_request,
        invoice_number=generate_invoice_number(),
        amount=subtotal + tax_amount,
        subtotal=subtotal,
        tax_rate=tax_rate,
        tax_amount=tax_amount,
        invoice_status="sent",
        due_date=due_date,
        notes=notes,
    )
    db.add(invoice)
    db.flush()
    db.add_all(build_missing_items(invoice))
    db.commit()
    db.refresh(invoice)
    invalidate_dashboard()
    logger.info("Invoice %s issued for rental request %s", invoice.invoice_number, rental_request.id)
    return invoice
