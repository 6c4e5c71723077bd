"""Payment endpoints: open a payment, read it, move its status."""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from rentmarket.app.core.errors import InternalError, NotFoundError, PermissionDeniedError
from rentmarket.app.db.session import get_db
from rentmarket.app.dependencies.auth import get_current_user_id
from rentmarket.app.models.payment import Payment
from rentmarket.app.models.rental_request import RentalRequest
from rentmarket.app.schemas.common import ApiResponse
from rentmarket.app.schemas.payment import PaymentCreate, PaymentRead, PaymentUpdate
from rentmarket.app.services.payments import apply_payment_update, is_payment_participant, start_payment

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/payments", tags=["payments"])


def _get_payment(db: Session, payment_id: int) -> Payment:
    payment = (
        db.query(Payment)
        .options(joinedload(Payment.rental_request).joinedload(RentalRequest.product))
        .filter(Payment.id == payment_id)
        .first()
    )
    if not payment:
        raise NotFoundError("Payment not found")
    return payment


@router.post("", response_model=ApiResponse[PaymentRead], status_code=status.HTTP_201_CREATED)
async def create_payment(
    payload: PaymentCreate,
    response: Response,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        rental_request = db.query(RentalRequest).filter(RentalRequest.id == payload.rental_request_id).first()
        if not rental_request:
            raise NotFoundError("Rental request not found")
        if rental_request.customer_id != user_id:
            raise PermissionDeniedError("Unauthorized to make payment for this rental request")
        payment, created = start_payment(db, rental_request, payload.payment_method)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error opening payment for rental request %s", payload.rental_request_id)
        raise InternalError("Failed to process payment")

    if not created:
        response.status_code = status.HTTP_200_OK
        return {"success": True, "message": "Payment already initiated", "data": payment}
    return {"success": True, "message": "Payment initiated successfully", "data": payment}


@router.get("/{payment_id}", response_model=ApiResponse[PaymentRead])
async def get_payment(payment_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    try:
        payment = _get_payment(db, payment_id)
    except SQLAlchemyError:
        logger.exception("Error fetching payment %s", payment_id)
        raise InternalError("Failed to retrieve payment")
    if not is_payment_participant(payment, user_id):
        raise PermissionDeniedError("Unauthorized to view this payment")
    return {"success": True, "message": "Payment retrieved successfully", "data": payment}


@router.put("/{payment_id}", response_model=ApiResponse[PaymentRead])
async def update_payment(
    payment_id: int,
    payload: PaymentUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        payment = _get_payment(db, payment_id)
        if not is_payment_participant(payment, user_id):
            raise PermissionDeniedError("Unauthorized to update this payment")
        payment = apply_payment_update(db, payment, payload)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error updating payment %s", payment_id)
        raise InternalError("Failed to update payment")
    return {"success": True, "message": "Payment updated successfully", "data": payment}
