"""Rental request endpoints for customers and product owners."""

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from rentmarket.app.core.errors import InternalError, NotFoundError
from rentmarket.app.db.session import get_db
from rentmarket.app.dependencies.auth import get_current_user_id
from rentmarket.app.models.product import Product
from rentmarket.app.models.rental_request import RentalRequest
from rentmarket.app.schemas.common import ApiResponse
from rentmarket.app.schemas.rental_request import RentalRequestCreate, RentalRequestRead, RentalRequestStatusUpdate
from rentmarket.app.services import rental_requests as rental_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/rental-requests", tags=["rental-requests"])


@router.get("", response_model=ApiResponse[List[RentalRequestRead]])
async def list_my_rental_requests(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    try:
        requests = (
            db.query(RentalRequest)
            .filter(RentalRequest.customer_id == user_id)
            .order_by(RentalRequest.created_at.desc(), RentalRequest.id.desc())
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Error fetching rental requests for user %s", user_id)
        raise InternalError("Failed to retrieve rental requests")
    return {"success": True, "message": "Rental requests retrieved successfully", "data": requests}


@router.post("", response_model=ApiResponse[RentalRequestRead], status_code=status.HTTP_201_CREATED)
async def create_rental_request(
    payload: RentalRequestCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        product = db.query(Product).filter(Product.id == payload.product_id).first()
        if not product:
            raise NotFoundError("Product not found")
        rental_request = rental_service.create_rental_request(db, product, user_id, payload)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating rental request for product %s", payload.product_id)
        raise InternalError("Failed to create rental request")
    return {"success": True, "message": "Rental request created successfully", "data": rental_request}


@router.put("/{rental_id}", response_model=ApiResponse[RentalRequestRead])
async def update_rental_request(
    rental_id: int,
    payload: RentalRequestStatusUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        rental_request = (
            db.query(RentalRequest)
            .options(joinedload(RentalRequest.product), joinedload(RentalRequest.customer))
            .filter(RentalRequest.id == rental_id)
            .first()
        )
        if not rental_request:
            raise NotFoundError("Rental request not found")
        rental_request = rental_service.update_rental_status(db, rental_request, user_id, payload.status)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error updating rental request %s", rental_id)
        raise InternalError("Failed to update rental request")
    return {"success": True, "message": "Rental request updated successfully", "data": rental_request}
