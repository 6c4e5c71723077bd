"""Payment made against a rental request."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from rentmarket.app.db.base_class import Base

PAYMENT_STATUSES = ("pending", "completed", "failed", "refunded")
PAYMENT_METHODS = ("card", "paypal", "apple_pay", "google_pay", "offline")


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    rental_request_id = Column(
        Integer, ForeignKey("rental_requests.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )
    payment_method = Column(String(50), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    payment_status = Column(String(20), default="pending", nullable=False, index=True)
    transaction_id = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    payment_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    rental_request = relationship("RentalRequest", back_populates="payment")
