"""Line item on an invoice."""

from sqlalchemy import Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from rentmarket.app.db.base_class import Base

INVOICE_ITEM_TYPES = ("rental_fee", "tax", "late_fee", "damage_fee", "additional_charge")


class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Numeric(10, 2), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    item_type = Column(String(32), nullable=False)

    invoice = relationship("Invoice", back_populates="items")
