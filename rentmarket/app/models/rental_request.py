"""Rental request placed by a customer against a product."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from rentmarket.app.db.base_class import Base

RENTAL_REQUEST_STATUSES = ("pending", "accepted", "rejected", "active", "completed", "cancelled", "paid", "returned")


class RentalRequest(Base):
    __tablename__ = "rental_requests"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    status = Column(String(20), default="pending", nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    rental_period = Column(Integer, nullable=False)
    pickup_location = Column(String(255), nullable=False)
    return_location = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    product = relationship("Product", back_populates="rental_requests")
    customer = relationship("User", back_populates="rental_requests", foreign_keys=[customer_id])
    payment = relationship("Payment", back_populates="rental_request", uselist=False, cascade="all, delete-orphan")
    invoice = relationship("Invoice", back_populates="rental_request", uselist=False, cascade="all, delete-orphan")
    notifications = relationship("Notification", back_populates="rental_request")
