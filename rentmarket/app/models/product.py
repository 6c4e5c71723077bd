"""Product listed for rent by its owner."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from rentmarket.app.db.base_class import Base

PRODUCT_STATUSES = ("available", "rented", "unavailable")


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=False)
    rental_price = Column(Numeric(10, 2), nullable=False)
    location = Column(String(255), nullable=False)
    status = Column(String(20), default="available", nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    owner = relationship("User", back_populates="products")
    rental_requests = relationship("RentalRequest", back_populates="product", cascade="all, delete-orphan")
