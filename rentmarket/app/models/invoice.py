"""Invoice issued for a rental request."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from rentmarket.app.db.base_class import Base

INVOICE_STATUSES = ("pending", "sent", "paid", "overdue", "cancelled")


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    rental_request_id = Column(
        Integer, ForeignKey("rental_requests.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )
    invoice_number = Column(String(64), unique=True, nullable=False)

    amount = Column(Numeric(10, 2), nullable=False)
    subtotal = Column(Numeric(10, 2), nullable=False)
    tax_rate = Column(Numeric(5, 4), default=0.1, nullable=False)
    tax_amount = Column(Numeric(10, 2), nullable=False)
    late_fee = Column(Numeric(10, 2), default=0, nullable=False)
    damage_fee = Column(Numeric(10, 2), default=0, nullable=False)
    additional_charges = Column(Numeric(10, 2), default=0, nullable=False)

    invoice_status = Column(String(20), default="pending", nullable=False)
    due_date = Column(DateTime(timezone=True), nullable=False)
    paid_date = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc), nullable=False)

    rental_request = relationship("RentalRequest", back_populates="invoice")
    items = relationship("InvoiceItem", back_populates="invoice", cascade="all, delete-orphan")
