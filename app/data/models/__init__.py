#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from app.data.models.product import ProductModel, VariantModel
from app.data.models.inventory import InventoryModel
from app.data.models.cart import CartModel, CartStatus
from app.data.models.cart_item import CartItemModel
from app.data.models.order import OrderModel, OrderStatus
from app.data.models.order_item import OrderItemModel
from app.data.models.payment import PaymentModel, PaymentStatus

__all__ = [
    "ProductModel",
    "VariantModel",
    "InventoryModel",
    "CartModel",
    "CartStatus",
    "CartItemModel",
    "OrderModel",
    "OrderStatus",
    "OrderItemModel",
    "PaymentModel",
    "PaymentStatus",
]
