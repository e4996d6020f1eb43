import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import relationship

from app.data.database import Base


class PaymentStatus:
    CREATED = "created"
    AUTHORIZED = "authorized"
    CAPTURED = "captured"
    FAILED = "failed"

    TERMINAL = (CAPTURED, FAILED)


class PaymentModel(Base):
    __tablename__ = "payments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id = Column(Uuid, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, unique=True)

    provider = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default=PaymentStatus.CREATED)
    amount = Column(Integer, nullable=False)
    currency = Column(String(3), nullable=False)

    # uzupelniane stopniowo: po utworzeniu zamowienia u dostawcy, potem po autoryzacji/capture
    provider_order_id = Column(String(64), nullable=True, unique=True)
    provider_payment_id = Column(String(64), nullable=True)
    provider_signature = Column(String(256), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    order = relationship("OrderModel", back_populates="payment")
