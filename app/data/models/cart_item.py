from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from app.data.database import Base


class CartItemModel(Base):
    __tablename__ = "cart_items"

    # autoincrement id = kolejnosc dodania do koszyka
    id = Column(Integer, primary_key=True)
    cart_id = Column(Uuid, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True)
    variant_id = Column(Uuid, ForeignKey("product_variants.id"), nullable=False)

    quantity = Column(Integer, nullable=False)

    cart = relationship("CartModel", back_populates="items")

    __table_args__ = (UniqueConstraint("cart_id", "variant_id", name="u_cart_variant"),)
