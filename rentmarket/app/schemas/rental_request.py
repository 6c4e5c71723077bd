"""Rental request schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

from rentmarket.app.core.time import ensure_utc


class RentalRequestCreate(BaseModel):
    product_id: int
    start_date: datetime
    end_date: datetime
    pickup_location: str
    return_location: str

    @field_validator("start_date", "end_date")
    @classmethod
    def dates_in_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class RentalRequestStatusUpdate(BaseModel):
    status: Literal["accepted", "rejected", "active", "completed", "cancelled", "returned"]


class RentalRequestRead(BaseModel):
    id: int
    product_id: int
    customer_id: int
    start_date: datetime
    end_date: datetime
    status: str
    price: Decimal
    rental_period: int
    pickup_location: str
    return_location: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
