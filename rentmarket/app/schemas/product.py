"""Product schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    category: str = Field(min_length=1, max_length=100)
    rental_price: Decimal = Field(gt=0)
    location: str = Field(min_length=1, max_length=255)
    status: Literal["available", "rented", "unavailable"] = "available"


class ProductRead(BaseModel):
    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    category: str
    rental_price: Decimal
    location: str
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
