# app/repos/cart_repo.py
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.data.models.product import ProductModel, VariantModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart(self, cart_id) -> CartModel | None:
        return self.db.get(CartModel, cart_id)

    def lock_cart(self, cart_id) -> CartModel | None:
        # blokada wiersza koszyka - dwa rownolegle checkouty tego samego koszyka ida po kolei
        return self.db.execute(
            select(CartModel)
            .where(CartModel.id == cart_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.flush()
        return cart

    def get_cart_item(self, cart_id, variant_id) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.variant_id == variant_id,
            )
        ).scalar_one_or_none()

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_cart_item(self, cart_id, variant_id) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.variant_id == variant_id,
            )
        )
        return result.rowcount

    def get_cart_lines(self, cart_id):
        """Linie koszyka z aktualna cena wariantu, w kolejnosci dodania."""
        stmt = (
            select(
                CartItemModel.variant_id,
                VariantModel.sku,
                ProductModel.name.label("product_name"),
                VariantModel.title.label("variant_title"),
                VariantModel.price.label("unit_price"),
                CartItemModel.quantity,
            )
            .join(VariantModel, VariantModel.id == CartItemModel.variant_id)
            .join(ProductModel, ProductModel.id == VariantModel.product_id)
            .where(CartItemModel.cart_id == cart_id)
            .order_by(CartItemModel.id)
        )
        return self.db.execute(stmt).all()
