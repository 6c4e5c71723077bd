"""Invoice schemas."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class InvoiceCreate(BaseModel):
    rental_request_id: int
    due_date: datetime
    notes: Optional[str] = None


class InvoiceItemRead(BaseModel):
    id: int
    description: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    item_type: str

    model_config = ConfigDict(from_attributes=True)


class InvoiceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    rental_request_id: int
    invoice_number: str

    amount: Decimal
    subtotal: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    late_fee: Decimal
    damage_fee: Decimal
    additional_charges: Decimal

    invoice_status: str
    due_date: datetime
    paid_date: Optional[datetime]
    notes: Optional[str]

    created_at: datetime
    updated_at: datetime

    items: List[InvoiceItemRead] = []
