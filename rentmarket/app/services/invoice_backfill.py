"""Repair invoices that were created without line items.

For each invoice with no items, a ``rental_fee`` item and a ``tax`` item are
synthesized from the invoice's stored subtotal and tax fields. Each invoice is
committed on its own so one broken invoice cannot undo the others.
"""

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.orm import Session, selectinload

from rentmarket.app.models.invoice import Invoice
from rentmarket.app.models.invoice_item import InvoiceItem
from rentmarket.app.models.rental_request import RentalRequest

logger = logging.getLogger(__name__)


@dataclass
class BackfillResult:
    total_invoices: int = 0
    fixed: int = 0
    failed: int = 0
    skipped: int = 0


def tax_rate_percent(tax_rate) -> str:
    """Render a fractional rate as a whole-number percentage, e.g. 0.08 -> "8"."""
    percent = (Decimal(str(tax_rate)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return str(percent)


def build_missing_items(invoice: Invoice) -> list[InvoiceItem]:
    # Raises AttributeError when the rental request or product is gone
    product_title = invoice.rental_request.product.title
    return [
        InvoiceItem(
            invoice_id=invoice.id,
            description=f"Rental fee for {product_title}",
            quantity=1,
            unit_price=invoice.subtotal,
            total_price=invoice.subtotal,
            item_type="rental_fee",
        ),
        InvoiceItem(
            invoice_id=invoice.id,
            description=f"Tax ({tax_rate_percent(invoice.tax_rate)}%)",
            quantity=1,
            unit_price=invoice.tax_amount,
            total_price=invoice.tax_amount,
            item_type="tax",
        ),
    ]


def backfill_invoice_items(db: Session) -> BackfillResult:
    invoices = (
        db.query(Invoice)
        .options(
            selectinload(Invoice.items),
            selectinload(Invoice.rental_request).selectinload(RentalRequest.product),
        )
        .order_by(Invoice.id)
        .all()
    )
    result = BackfillResult(total_invoices=len(invoices))
    logger.info("Found %d invoices", result.total_invoices)

    for invoice in invoices:
        invoice_number = invoice.invoice_number
        if invoice.items:
            result.skipped += 1
            continue

        logger.info("Invoice %s has no items, creating them", invoice_number)
        try:
            db.add_all(build_missing_items(invoice))
            db.commit()
        except Exception:
            db.rollback()
            result.failed += 1
            logger.exception("Failed to add items to invoice %s", invoice_number)
            continue
        result.fixed += 1
        logger.info("Added items to invoice %s", invoice_number)

    logger.info(
        "Backfill complete: %d fixed, %d failed, %d already had items",
        result.fixed,
        result.failed,
        result.skipped,
    )
    return result
