# app/services/cart_service.py
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from app.data.database import atomic
from app.data.models.cart import CartModel, CartStatus
from app.data.models.cart_item import CartItemModel
from app.domain.errors import CartClosed, InvalidInput, NotFound
from app.repos.cart_repo import CartRepo
from app.repos.catalog_repo import CatalogRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)

MAX_ITEM_QUANTITY = 20


class CartService:
    """
    Use case'y dla koszyka.
    commands (create, upsert, delete) modyfikuja stan,
    query (get, snapshot) tylko odczyt.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CartRepo(db)
        self.catalog = CatalogRepo(db)

    # =====================================================
    # QUERY
    # =====================================================
    def snapshot(self, cart_id) -> List[Any]:
        """
        Linie koszyka z aktualnymi cenami, w kolejnosci dodania.
        Pusta lista jest zwracana - odrzuca ja checkout.
        """
        if self.repo.get_cart(cart_id) is None:
            raise NotFound(f"cart {cart_id} not found")
        return self.repo.get_cart_lines(cart_id)

    def get_cart(self, cart_id) -> Dict[str, Any]:
        cart = self.repo.get_cart(cart_id)
        if cart is None:
            raise NotFound(f"cart {cart_id} not found")

        items = []
        subtotal = 0
        for line in self.repo.get_cart_lines(cart_id):
            line_total = line.unit_price * line.quantity
            subtotal += line_total
            items.append(
                {
                    "variant_id": line.variant_id,
                    "sku": line.sku,
                    "product_name": line.product_name,
                    "variant_title": line.variant_title,
                    "unit_price": line.unit_price,
                    "quantity": line.quantity,
                    "line_total": line_total,
                }
            )

        return {
            "id": cart.id,
            "status": cart.status,
            "items": items,
            "subtotal": subtotal,
        }

    # =====================================================
    # COMMANDS
    # =====================================================
    def create_cart(self):
        with atomic(self.db):
            cart = self.repo.create_cart(CartModel(status=CartStatus.OPEN))
            cart_id = cart.id

        logger.info(f"Utworzono koszyk {cart_id}")
        return cart_id

    def upsert_item(self, cart_id, variant_id, quantity: int) -> None:
        """Ustawia (nie dodaje) ilosc wariantu w koszyku."""
        if quantity < 1 or quantity > MAX_ITEM_QUANTITY:
            raise InvalidInput(f"quantity must be between 1 and {MAX_ITEM_QUANTITY}")

        with atomic(self.db):
            cart = self._open_cart(cart_id)

            if self.catalog.get_variant(variant_id) is None:
                raise NotFound(f"variant {variant_id} not found")

            existing = self.repo.get_cart_item(cart.id, variant_id)
            if existing:
                # zostaje na swojej pozycji w koszyku
                existing.quantity = quantity
            else:
                self.repo.add_cart_item(
                    CartItemModel(cart_id=cart.id, variant_id=variant_id, quantity=quantity)
                )

        logger.info(f"Koszyk {cart_id}: wariant {variant_id} ilosc {quantity}")

    def delete_item(self, cart_id, variant_id) -> None:
        with atomic(self.db):
            cart = self._open_cart(cart_id)
            removed = self.repo.delete_cart_item(cart.id, variant_id)

        logger.info(f"Koszyk {cart_id}: usunieto wariant {variant_id} ({removed} wierszy)")

    def _open_cart(self, cart_id) -> CartModel:
        cart = self.repo.lock_cart(cart_id)
        if cart is None:
            raise NotFound(f"cart {cart_id} not found")
        if cart.status != CartStatus.OPEN:
            raise CartClosed(f"cart {cart_id} is {cart.status}")
        return cart
