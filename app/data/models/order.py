import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Integer, String, Uuid
from sqlalchemy.orm import relationship

from app.data.database import Base


class OrderStatus:
    PENDING_PAYMENT = "pending_payment"
    PAID = "paid"
    FAILED = "failed"


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    status = Column(String(20), nullable=False, default=OrderStatus.PENDING_PAYMENT)
    currency = Column(String(3), nullable=False)
    subtotal = Column(Integer, nullable=False)
    shipping = Column(Integer, nullable=False)
    tax = Column(Integer, nullable=False)
    total = Column(Integer, nullable=False)

    customer_name = Column(String(200), nullable=False)
    customer_phone = Column(String(40), nullable=False)
    customer_email = Column(String(200), nullable=False, default="")
    # dokument przekazywany bez interpretacji
    shipping_address = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    items = relationship("OrderItemModel", back_populates="order", order_by="OrderItemModel.id")
    payment = relationship("PaymentModel", back_populates="order", uselist=False)
