# app/services/checkout_service.py
from sqlalchemy.orm import Session

from app.data.database import atomic
from app.data.models.cart import CartStatus
from app.data.models.order import OrderModel, OrderStatus
from app.data.models.order_item import OrderItemModel
from app.data.models.payment import PaymentModel, PaymentStatus
from app.domain.errors import CartClosed, EmptyCart, InvalidInput, NotFound
from app.domain.money import compute_totals
from app.domain.schemas import CheckoutResult, Customer
from app.repos.cart_repo import CartRepo
from app.repos.order_repo import OrderRepo
from app.repos.payment_repo import PaymentRepo
from app.services.cart_service import CartService
from app.services.inventory_ledger import InventoryLedger
from app.utils.settings import CURRENCY
from app.utils.logging import get_logger

logger = get_logger(__name__)

PROVIDER = "razorpay"


class CheckoutService:
    """
    Checkout koszyka jako jedna transakcja:
    zamowienie + migawki linii + rezerwacje + platnosc + zamkniecie koszyka.
    Albo powstaje wszystko, albo nic.
    """

    def __init__(self, db: Session, currency: str = CURRENCY):
        self.db = db
        self.currency = currency
        self.carts = CartRepo(db)
        self.cart_reader = CartService(db)
        self.orders = OrderRepo(db)
        self.payments = PaymentRepo(db)
        self.ledger = InventoryLedger(db)

    def checkout(self, cart_id, customer: Customer, shipping_flat: int, tax_rate_bps: int) -> CheckoutResult:
        if shipping_flat < 0 or tax_rate_bps < 0:
            raise InvalidInput("shipping and tax rate must not be negative")

        with atomic(self.db):
            cart = self.carts.lock_cart(cart_id)
            if cart is None:
                raise NotFound(f"cart {cart_id} not found")
            if cart.status != CartStatus.OPEN:
                raise CartClosed(f"cart {cart_id} is {cart.status}")

            lines = self.cart_reader.snapshot(cart_id)
            if not lines:
                raise EmptyCart(f"cart {cart_id} is empty")

            totals = compute_totals(lines, shipping_flat, tax_rate_bps)

            order = self.orders.create_order(
                OrderModel(
                    status=OrderStatus.PENDING_PAYMENT,
                    currency=self.currency,
                    subtotal=totals.subtotal,
                    shipping=totals.shipping,
                    tax=totals.tax,
                    total=totals.total,
                    customer_name=customer.name,
                    customer_phone=customer.phone,
                    customer_email=customer.email or "",
                    shipping_address=customer.shipping_address,
                )
            )

            # kolejnosc dodania do koszyka; pierwszy brak towaru przerywa calosc
            for line in lines:
                self.orders.add_order_item(
                    OrderItemModel(
                        order_id=order.id,
                        variant_id=line.variant_id,
                        sku=line.sku,
                        product_name=line.product_name,
                        variant_title=line.variant_title,
                        unit_price=line.unit_price,
                        quantity=line.quantity,
                        line_total=line.unit_price * line.quantity,
                    )
                )
                self.ledger.reserve(line.variant_id, line.quantity)

            payment = self.payments.create_payment(
                PaymentModel(
                    order_id=order.id,
                    provider=PROVIDER,
                    status=PaymentStatus.CREATED,
                    amount=totals.total,
                    currency=self.currency,
                )
            )

            cart.status = CartStatus.CHECKED_OUT

            result = CheckoutResult(
                order_id=order.id,
                payment_id=payment.id,
                amount=totals.total,
                currency=self.currency,
                provider=PROVIDER,
            )

        logger.info(
            f"Checkout koszyka {cart_id}: zamowienie {result.order_id}, "
            f"platnosc {result.payment_id}, kwota {result.amount} {result.currency}"
        )
        return result
