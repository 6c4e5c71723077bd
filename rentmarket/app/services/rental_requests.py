"""Rental request creation and status transitions."""

import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from rentmarket.app.core.errors import PermissionDeniedError, ValidationError
from rentmarket.app.models.product import Product
from rentmarket.app.models.rental_request import RentalRequest
from rentmarket.app.schemas.rental_request import RentalRequestCreate
from rentmarket.app.services.dashboard_stats import invalidate_dashboard
from rentmarket.app.services.notifications import build_notification, invalidate_notifications

logger = logging.getLogger(__name__)

# Statuses that hand the product back to the owner's available stock
RELEASING_STATUSES = {"rejected", "cancelled", "returned", "completed"}
CUSTOMER_STATUSES = {"cancelled"}

STATUS_NOTICES = {
    "accepted": ("approved", "Rental request approved", "Your rental request for {title} has been approved by the owner"),
    "rejected": ("rejected", "Rental request rejected", "Your rental request for {title} has been rejected by the owner"),
    "active": ("active", "Rental started", "Your rental of {title} is now active"),
    "cancelled": ("cancelled", "Rental request cancelled", "Your rental request for {title} has been cancelled"),
    "returned": (
        "returned",
        "Return confirmed",
        "Your return for {title} has been confirmed. The product is now available for rent again.",
    ),
    "completed": ("completed", "Rental completed", "Your rental for {title} has been marked as completed"),
}


def rental_days(start, end) -> int:
    """Whole days between start and end, counting a partial day as a full one."""
    seconds = (end - start).total_seconds()
    days = int(seconds // 86400)
    if seconds % 86400:
        days += 1
    return days


def create_rental_request(db: Session, product: Product, customer_id: int, payload: RentalRequestCreate) -> RentalRequest:
    """Store a pending request and the owner's notification in one commit."""
    if product.user_id == customer_id:
        raise ValidationError("You cannot rent your own product")
    if product.status != "available":
        raise ValidationError("Product is not available for rent")
    if payload.end_date <= payload.start_date:
        raise ValidationError("End date must be after start date")

    days = rental_days(payload.start_date, payload.end_date)
    rental_request = RentalRequest(
        product=product,
        customer_id=customer_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        price=Decimal(str(product.rental_price)) * days,
        rental_period=days,
        pickup_location=payload.pickup_location,
        return_location=payload.return_location,
    )
    db.add(rental_request)
    db.flush()
    db.add(
        build_notification(
            user_id=product.user_id,
            rental_request_id=rental_request.id,
            type="rental_request",
            title="New rental request",
            message=f"You have a new rental request for {product.title}",
            data={"productId": product.id, "startDate": payload.start_date, "endDate": payload.end_date},
        )
    )
    db.commit()
    db.refresh(rental_request)
    invalidate_dashboard()
    invalidate_notifications()
    logger.info("Rental request %s created for product %s", rental_request.id, product.id)
    return rental_request


def update_rental_status(db: Session, rental_request: RentalRequest, user_id: int, new_status: str) -> RentalRequest:
    """Move a request to ``new_status`` on behalf of ``user_id``.

    The product owner may set any status; the customer may only cancel.
    """
    product = rental_request.product
    is_owner = product.user_id == user_id
    is_customer = rental_request.customer_id == user_id
    if not is_owner and not is_customer:
        raise PermissionDeniedError("Unauthorized to update this rental request")
    if not is_owner and new_status not in CUSTOMER_STATUSES:
        raise PermissionDeniedError("Only the product owner can set this status")

    old_status = rental_request.status
    rental_request.status = new_status
    if new_status in RELEASING_STATUSES:
        product.status = "available"

    notice_type, title, message = STATUS_NOTICES[new_status]
    notices = [
        build_notification(
            user_id=rental_request.customer_id,
            rental_request_id=rental_request.id,
            type=notice_type,
            title=title,
            message=message.format(title=product.title),
            data={"productId": product.id, "oldStatus": old_status, "newStatus": new_status},
        )
    ]
    if not is_owner and old_status != new_status:
        notices.append(
            build_notification(
                user_id=product.user_id,
                rental_request_id=rental_request.id,
                type=f"customer_{new_status}",
                title="Request cancelled by customer",
                message=f"{rental_request.customer.name} has cancelled their rental request for {product.title}",
                data={"productId": product.id, "oldStatus": old_status, "newStatus": new_status},
            )
        )
    db.add_all(notices)
    db.commit()
    db.refresh(rental_request)
    invalidate_dashboard()
    invalidate_notifications()
    logger.info("Rental request %s moved from %s to %s", rental_request.id, old_status, new_status)
    return rental_request
