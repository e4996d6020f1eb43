from sqlalchemy import Column, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import relationship

from app.data.database import Base


class OrderItemModel(Base):
    """Migawka linii z chwili checkoutu - cena i opisy nie sa pozniej przeliczane."""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Uuid, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    variant_id = Column(Uuid, ForeignKey("product_variants.id"), nullable=False)

    sku = Column(String(64), nullable=False)
    product_name = Column(String(200), nullable=False)
    variant_title = Column(String(200), nullable=False)
    unit_price = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False)
    line_total = Column(Integer, nullable=False)

    order = relationship("OrderModel", back_populates="items")
