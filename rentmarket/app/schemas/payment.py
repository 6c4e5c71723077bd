"""Payment schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict


class PaymentCreate(BaseModel):
    rental_request_id: int
    payment_method: Literal["card", "paypal", "apple_pay", "google_pay", "offline"]


class PaymentUpdate(BaseModel):
    payment_status: Literal["pending", "completed", "failed", "refunded"]
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None
    notes: Optional[str] = None
    payment_date: Optional[datetime] = None


class PaymentRead(BaseModel):
    id: int
    rental_request_id: int
    payment_method: str
    amount: Decimal
    payment_status: str
    transaction_id: Optional[str] = None
    notes: Optional[str] = None
    payment_date: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
