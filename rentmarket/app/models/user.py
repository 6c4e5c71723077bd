from sqlalchemy import Boolean, Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from rentmarket.app.db.base_class import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    products = relationship("Product", back_populates="owner", cascade="all, delete-orphan")
    rental_requests = relationship(
        "RentalRequest", back_populates="customer", cascade="all, delete-orphan", foreign_keys="RentalRequest.customer_id"
    )
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")
