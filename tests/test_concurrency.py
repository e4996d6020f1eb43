"""Rownolegle checkouty tego samego wariantu - bez overselling."""
import threading
from concurrent.futures import ThreadPoolExecutor

from app.domain.errors import InsufficientStock
from app.services.checkout_service import CheckoutService
from app.services.payment_service import PaymentService


def test_concurrent_checkouts_do_not_oversell(session_factory, make_variant, make_cart, levels, customer):
    workers = 4
    vid = make_variant(on_hand=5)
    carts = [make_cart((vid, 3)) for _ in range(workers)]
    barrier = threading.Barrier(workers)

    def _checkout(cart_id):
        barrier.wait()
        with session_factory() as s:
            try:
                CheckoutService(s).checkout(cart_id, customer, 0, 0)
                return "ok"
            except InsufficientStock:
                return "insufficient"

    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(_checkout, carts))

    assert results.count("ok") == 1
    assert results.count("insufficient") == workers - 1
    assert levels(vid) == (5, 3)


def test_concurrent_duplicate_captures_apply_once(session_factory, in_session, make_variant, make_cart, levels, customer):
    workers = 4
    vid = make_variant(on_hand=5)
    cart_id = make_cart((vid, 2))
    result = in_session(lambda s: CheckoutService(s).checkout(cart_id, customer, 0, 0))
    in_session(lambda s: PaymentService(s).record_provider_order_id(result.payment_id, "order_dup"))
    barrier = threading.Barrier(workers)

    def _capture(_):
        barrier.wait()
        with session_factory() as s:
            return PaymentService(s).mark_captured("order_dup", "pay_dup").value

    with ThreadPoolExecutor(max_workers=workers) as pool:
        outcomes = list(pool.map(_capture, range(workers)))

    assert outcomes.count("applied") == 1
    assert outcomes.count("noop") == workers - 1
    assert levels(vid) == (3, 0)
