# app/services/order_service.py
from sqlalchemy.orm import Session

from app.domain.errors import NotFound
from app.repos.order_repo import OrderRepo
from app.repos.payment_repo import PaymentRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_LIST_LIMIT = 50
MAX_LIST_LIMIT = 200


class OrderService:
    """
    Zapytania o zamowienia dla panelu admina (tylko odczyt).
    Zmiany stanu zamowien robia CheckoutService i PaymentService.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepo(db)
        self.payments = PaymentRepo(db)

    def list_orders(self, limit: int = DEFAULT_LIST_LIMIT):
        if limit <= 0 or limit > MAX_LIST_LIMIT:
            limit = DEFAULT_LIST_LIMIT

        return [
            {
                "id": o.id,
                "status": o.status,
                "total": o.total,
                "currency": o.currency,
                "created_at": o.created_at,
            }
            for o in self.repo.list_orders(limit)
        ]

    def get_order(self, order_id):
        """
        Use Case: Pobranie zamowienia (Query).
        Linie pochodza z migawek z checkoutu, nie z aktualnego katalogu.
        """
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFound(f"order {order_id} not found")

        payment = self.payments.get_by_order(order.id)

        return {
            "id": order.id,
            "status": order.status,
            "currency": order.currency,
            "subtotal": order.subtotal,
            "shipping": order.shipping,
            "tax": order.tax,
            "total": order.total,
            "customer_name": order.customer_name,
            "customer_phone": order.customer_phone,
            "customer_email": order.customer_email,
            "shipping_address": order.shipping_address,
            "items": [
                {
                    "variant_id": i.variant_id,
                    "sku": i.sku,
                    "product_name": i.product_name,
                    "variant_title": i.variant_title,
                    "unit_price": i.unit_price,
                    "quantity": i.quantity,
                    "line_total": i.line_total,
                }
                for i in self.repo.get_order_items(order.id)
            ],
            "payment_status": payment.status if payment else "missing",
            "provider_order_id": payment.provider_order_id if payment else None,
            "created_at": order.created_at,
        }
