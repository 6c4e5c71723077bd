"""Invoice endpoints: issue one for a rental, read it back with items."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from rentmarket.app.core.errors import InternalError, NotFoundError, PermissionDeniedError
from rentmarket.app.db.session import get_db
from rentmarket.app.dependencies.auth import get_current_user_id
from rentmarket.app.models.invoice import Invoice
from rentmarket.app.models.rental_request import RentalRequest
from rentmarket.app.schemas.common import ApiResponse
from rentmarket.app.schemas.invoice import InvoiceCreate, InvoiceRead
from rentmarket.app.services.invoices import issue_invoice

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


@router.post("", response_model=ApiResponse[InvoiceRead], status_code=status.HTTP_201_CREATED)
async def create_invoice(
    payload: InvoiceCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        rental_request = (
            db.query(RentalRequest)
            .options(joinedload(RentalRequest.product), joinedload(RentalRequest.invoice))
            .filter(RentalRequest.id == payload.rental_request_id)
            .first()
        )
        if not rental_request:
            raise NotFoundError("Rental request not found")
        if user_id not in (rental_request.customer_id, rental_request.product.user_id):
            raise PermissionDeniedError("Unauthorized to create invoice for this rental request")
        invoice = issue_invoice(db, rental_request, payload.due_date, payload.notes)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating invoice for rental request %s", payload.rental_request_id)
        raise InternalError("Failed to create invoice")
    return {"success": True, "message": "Invoice created successfully", "data": invoice}


@router.get("/{invoice_id}", response_model=ApiResponse[InvoiceRead])
async def get_invoice(invoice_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    try:
        invoice = (
            db.query(Invoice)
            .options(
                selectinload(Invoice.items),
                joinedload(Invoice.rental_request).joinedload(RentalRequest.product),
            )
            .filter(Invoice.id == invoice_id)
            .first()
        )
    except SQLAlchemyError:
        logger.exception("Error fetching invoice %s", invoice_id)
        raise InternalError("Failed to retrieve invoice")
    if not invoice or invoice.rental_request is None:
        raise NotFoundError("Invoice not found")
    rental_request = invoice.rental_request
    if user_id not in (rental_request.customer_id, rental_request.product.user_id):
        raise PermissionDeniedError("Unauthorized to view this invoice")
    return {"success": True, "message": "Invoice retrieved successfully", "data": invoice}
