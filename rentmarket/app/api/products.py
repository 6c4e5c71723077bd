"""Product listing endpoints for owners."""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rentmarket.app.core.errors import InternalError
from rentmarket.app.db.session import get_db
from rentmarket.app.dependencies.auth import get_current_user_id
from rentmarket.app.models.product import Product
from rentmarket.app.schemas.common import ApiResponse
from rentmarket.app.schemas.product import ProductCreate, ProductRead
from rentmarket.app.services.dashboard_stats import invalidate_dashboard

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=ApiResponse[List[ProductRead]])
async def list_products(
    owner: bool = False,
    category: str | None = None,
    limit: int | None = Query(default=None, ge=1),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    query = db.query(Product)
    if owner:
        query = query.filter(Product.user_id == user_id)
    else:
        query = query.filter(Product.user_id != user_id, Product.status.in_(["available", "rented"]))
    if category:
        query = query.filter(Product.category.ilike(f"%{category}%"))
    query = query.order_by(Product.created_at.desc(), Product.id.desc())
    if limit is not None:
        query = query.limit(limit)
    try:
        products = query.all()
    except SQLAlchemyError:
        logger.exception("Error fetching products for user %s", user_id)
        raise InternalError("Failed to retrieve products")
    return {"success": True, "message": "Products retrieved successfully", "data": products}


@router.post("", response_model=ApiResponse[ProductRead], status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        product = Product(user_id=user_id, **payload.model_dump())
        db.add(product)
        db.commit()
        db.refresh(product)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating product for user %s", user_id)
        raise InternalError("Failed to create product")
    invalidate_dashboard()
    return {"success": True, "message": "Product created successfully", "data": product}
