"""Payment creation, status transitions and their side effects."""

import logging

from sqlalchemy.orm import Session

from rentmarket.app.core.errors import ValidationError
from rentmarket.app.core.time import utc_now
from rentmarket.app.models.payment import Payment
from rentmarket.app.models.rental_request import RentalRequest
from rentmarket.app.schemas.payment import PaymentUpdate
from rentmarket.app.services.dashboard_stats import invalidate_dashboard
from rentmarket.app.services.notifications import build_notification, invalidate_notifications

logger = logging.getLogger(__name__)


def is_payment_participant(payment: Payment, user_id: int) -> bool:
    rental_request: RentalRequest = payment.rental_request
    return rental_request.customer_id == user_id or rental_request.product.user_id == user_id


def start_payment(db: Session, rental_request: RentalRequest, payment_method: str) -> tuple[Payment, bool]:
    """Open a pending payment for an accepted rental request.

    The amount always comes from the stored rental price. A pending payment is
    returned as is, a failed one is replaced, and a completed one is an error.
    Returns the payment and whether it was created by this call.
    """
    if rental_request.status != "accepted":
        raise ValidationError("Rental request must be accepted before payment")

    existing = rental_request.payment
    if existing is not None:
        if existing.payment_status == "pending":
            return existing, False
        if existing.payment_status != "failed":
            raise ValidationError("Payment already exists for this rental request")
        db.delete(existing)
        db.flush()

    if rental_request.price is None or rental_request.price <= 0:
        raise ValidationError("Invalid payment amount")

    payment = Payment(
        rental_request_id=rental_request.id,
        payment_method=payment_method,
        amount=rental_request.price,
        payment_status="pending",
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)
    logger.info("Payment %s opened for rental request %s", payment.id, rental_request.id)
    return payment, True


def apply_payment_update(db: Session, payment: Payment, update: PaymentUpdate) -> Payment:
    """Apply a status update.

    The first move to ``completed`` marks the rental paid, the product rented
    and any invoice paid, and notifies both parties in the same commit.
    """
    was_completed = payment.payment_status == "completed"

    payment.payment_status = update.payment_status
    if update.payment_method is not None:
        payment.payment_method = update.payment_method
    if update.transaction_id is not None:
        payment.transaction_id = update.transaction_id
    if update.notes is not None:
        payment.notes = update.notes
    if update.payment_date is not None:
        payment.payment_date = update.payment_date

    rental_request = payment.rental_request
    completed_now = update.payment_status == "completed" and not was_completed
    if completed_now:
        now = utc_now()
        if payment.payment_date is None:
            payment.payment_date = now
        rental_request.status = "paid"
        product = rental_request.product
        product.status = "rented"

        invoice = rental_request.invoice
        if invoice is not None and invoice.invoice_status != "paid":
            invoice.invoice_status = "paid"
            invoice.paid_date = now

        db.add_all(
            [
                build_notification(
                    user_id=product.user_id,
                    rental_request_id=rental_request.id,
                    type="payment_completed",
                    title="Payment received",
                    message=f"Payment received for {product.title}. Product is now rented.",
                    data={"productTitle": product.title, "amount": payment.amount},
                ),
                build_notification(
                    user_id=rental_request.customer_id,
                    rental_request_id=rental_request.id,
                    type="payment_confirmed",
                    title="Payment confirmed",
                    message=f"Your payment for {product.title} has been confirmed",
                    data={"productTitle": product.title, "amount": payment.amount},
                ),
            ]
        )

    db.commit()
    db.refresh(payment)
    invalidate_dashboard()
    if completed_now:
        invalidate_notifications()
    logger.info("Payment %s moved to %s", payment.id, payment.payment_status)
    return payment
