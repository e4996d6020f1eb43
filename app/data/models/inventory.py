# app/data/models/inventory.py
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Uuid

from app.data.database import Base


class InventoryModel(Base):
    """
    Jeden wiersz na wariant. Jedyne zrodlo prawdy o dostepnosci:
    available = on_hand - reserved.
    """

    __tablename__ = "inventory"

    variant_id = Column(Uuid, ForeignKey("product_variants.id", ondelete="CASCADE"), primary_key=True)

    on_hand = Column(Integer, nullable=False, default=0)
    reserved = Column(Integer, nullable=False, default=0)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint("on_hand >= 0", name="ck_inventory_on_hand_non_negative"),
        CheckConstraint("reserved >= 0", name="ck_inventory_reserved_non_negative"),
    )

    @property
    def available(self) -> int:
        return self.on_hand - self.reserved
