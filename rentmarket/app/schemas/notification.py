"""Notification schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from rentmarket.app.schemas.common import camel_output


class NotificationProductSummary(BaseModel):
    id: int
    title: str
    rental_price: Decimal

    model_config = ConfigDict(from_attributes=True)


class NotificationRentalRequest(BaseModel):
    id: int
    status: str
    product: Optional[NotificationProductSummary] = None

    model_config = ConfigDict(from_attributes=True)


class NotificationRead(BaseModel):
    id: int
    user_id: int
    rental_request_id: Optional[int] = None
    type: str
    title: str
    message: str
    data: Optional[str] = None
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime
    rental_request: Optional[NotificationRentalRequest] = None

    model_config = camel_output


class NotificationCreate(BaseModel):
    user_id: int = Field(alias="userId")
    rental_request_id: Optional[int] = Field(default=None, alias="rentalRequestId")
    type: str = Field(min_length=1, max_length=50)
    title: str = Field(min_length=1, max_length=255)
    message: str = Field(min_length=1)
    data: Optional[Any] = None

    model_config = ConfigDict(populate_by_name=True)


class MarkReadRequest(BaseModel):
    notification_ids: Optional[List[int]] = Field(default=None, alias="notificationIds")
    mark_all: Optional[bool] = Field(default=None, alias="markAll")

    model_config = ConfigDict(populate_by_name=True)


class NotificationList(BaseModel):
    success: bool = True
    data: List[NotificationRead]
    unread_count: int = Field(alias="unreadCount")

    model_config = ConfigDict(populate_by_name=True)


class MarkReadResult(BaseModel):
    count: int
