"""Notification endpoints: list, create and mark as read."""

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rentmarket.app.core.errors import InternalError, ValidationError
from rentmarket.app.core.settings import get_settings
from rentmarket.app.db.session import get_db
from rentmarket.app.dependencies.auth import get_current_user_id
from rentmarket.app.models.rental_request import RentalRequest
from rentmarket.app.models.user import User
from rentmarket.app.schemas.common import ApiResponse
from rentmarket.app.schemas.notification import (
    MarkReadRequest,
    MarkReadResult,
    NotificationCreate,
    NotificationList,
    NotificationRead,
)
from rentmarket.app.services import notifications as notification_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notifications", tags=["notifications"])

MARK_READ_SHAPE_ERROR = "Invalid request. Provide notificationIds array or markAll=true"


@router.get("", response_model=NotificationList)
async def list_notifications(
    response: Response,
    unread_only: bool = Query(default=False, alias="unreadOnly"),
    limit: int = Query(default=notification_service.DEFAULT_LIMIT),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        items = notification_service.get_cached_notifications(db, user_id, unread_only=unread_only, limit=limit)
        unread_count = notification_service.get_cached_unread_count(db, user_id)
    except SQLAlchemyError:
        logger.exception("Error fetching notifications for user %s", user_id)
        raise InternalError("Failed to retrieve notifications")

    response.headers["Cache-Control"] = get_settings().cache_control_header
    return {"success": True, "data": items, "unread_count": unread_count}


@router.post("", response_model=ApiResponse[NotificationRead], status_code=status.HTTP_201_CREATED)
async def create_notification(
    payload: NotificationCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        if not db.query(User.id).filter(User.id == payload.user_id).first():
            raise ValidationError("Recipient user does not exist")
        if (
            payload.rental_request_id is not None
            and not db.query(RentalRequest.id).filter(RentalRequest.id == payload.rental_request_id).first()
        ):
            raise ValidationError("Rental request does not exist")
        notification = notification_service.create_notification(
            db,
            user_id=payload.user_id,
            rental_request_id=payload.rental_request_id,
            type=payload.type,
            title=payload.title,
            message=payload.message,
            data=payload.data,
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating notification on behalf of user %s", user_id)
        raise InternalError("Failed to create notification")

    return {"success": True, "message": "Notification created successfully", "data": notification}


@router.patch("/mark-read", response_model=ApiResponse[MarkReadResult])
async def mark_notifications_read(
    payload: MarkReadRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    wants_all = payload.mark_all is True
    has_ids = bool(payload.notification_ids)
    if wants_all == has_ids:
        raise ValidationError(MARK_READ_SHAPE_ERROR)

    try:
        if wants_all:
            count = notification_service.mark_all_read(db, user_id)
        else:
            count = notification_service.mark_read(db, user_id, payload.notification_ids)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error marking notifications as read for user %s", user_id)
        raise InternalError("Failed to mark notifications as read")

    return {"success": True, "message": f"Marked {count} notifications as read", "data": {"count": count}}
