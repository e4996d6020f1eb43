"""Maszyna stanow platnosci: idempotencja i kaskada na zamowienie oraz magazyn."""
import hashlib
import hmac
import uuid

import pytest

from app.data.models.order import OrderModel
from app.data.models.payment import PaymentModel
from app.domain.errors import InvalidInput, NotFound, ProviderVerificationFailed
from app.services.checkout_service import CheckoutService
from app.services.payment_service import PaymentService, ReconcileOutcome


@pytest.fixture
def placed_order(in_session, make_variant, make_cart, customer):
    """Wariant (cena 500, on_hand 2) w zamowieniu qty 2 z zapisanym order_id dostawcy."""

    def _place(provider_order_id="order_rzp_1", on_hand=2, qty=2):
        vid = make_variant(price=500, on_hand=on_hand)
        cart_id = make_cart((vid, qty))
        result = in_session(lambda s: CheckoutService(s).checkout(cart_id, customer, 0, 0))
        in_session(lambda s: PaymentService(s).record_provider_order_id(result.payment_id, provider_order_id))
        return vid, result

    return _place


@pytest.fixture
def statuses(in_session):
    def _statuses(result):
        def _read(s):
            return s.get(OrderModel, result.order_id).status, s.get(PaymentModel, result.payment_id).status

        return in_session(_read)

    return _statuses


def _reconcile(in_session, kind, order_id="order_rzp_1", payment_id="pay_1", signature=None):
    return in_session(lambda s: PaymentService(s).reconcile(kind, order_id, payment_id, signature))


class TestCapture:
    def test_capture_pays_order_and_consumes_stock(self, in_session, placed_order, statuses, levels):
        vid, result = placed_order()
        assert levels(vid) == (2, 2)

        outcome = _reconcile(in_session, "payment.captured")

        assert outcome == ReconcileOutcome.APPLIED
        assert statuses(result) == ("paid", "captured")
        assert levels(vid) == (0, 0)

    def test_capture_twice_equals_capture_once(self, in_session, placed_order, statuses, levels):
        vid, result = placed_order(on_hand=5, qty=2)

        _reconcile(in_session, "payment.captured")
        once = (statuses(result), levels(vid))
        outcome = _reconcile(in_session, "payment.captured")

        assert outcome == ReconcileOutcome.NOOP
        assert (statuses(result), levels(vid)) == once == (("paid", "captured"), (3, 0))

    def test_failed_after_capture_is_noop(self, in_session, placed_order, statuses, levels):
        vid, result = placed_order()
        _reconcile(in_session, "payment.captured")

        outcome = _reconcile(in_session, "payment.failed")

        assert outcome == ReconcileOutcome.NOOP
        assert statuses(result) == ("paid", "captured")
        assert levels(vid) == (0, 0)

    def test_capture_records_provider_payment_id(self, in_session, placed_order):
        _, result = placed_order()
        _reconcile(in_session, "payment.captured", payment_id="pay_XYZ")

        assert in_session(lambda s: s.get(PaymentModel, result.payment_id).provider_payment_id) == "pay_XYZ"


class TestFailure:
    def test_failure_releases_reservation(self, in_session, placed_order, statuses, levels):
        vid, result = placed_order()

        outcome = _reconcile(in_session, "payment.failed")

        assert outcome == ReconcileOutcome.APPLIED
        assert statuses(result) == ("failed", "failed")
        assert levels(vid) == (2, 0)

    def test_failure_redelivery_is_noop(self, in_session, placed_order, statuses, levels):
        vid, result = placed_order()
        _reconcile(in_session, "payment.failed")

        assert _reconcile(in_session, "payment.failed") == ReconcileOutcome.NOOP
        assert statuses(result) == ("failed", "failed")
        assert levels(vid) == (2, 0)

    def test_capture_after_failure_does_not_consume(self, in_session, placed_order, statuses, levels):
        vid, result = placed_order()
        _reconcile(in_session, "payment.failed")

        assert _reconcile(in_session, "payment.captured") == ReconcileOutcome.NOOP
        assert statuses(result) == ("failed", "failed")
        assert levels(vid) == (2, 0)


class TestAuthorize:
    def test_authorize_records_payment_and_signature(self, in_session, placed_order, statuses):
        _, result = placed_order()

        outcome = _reconcile(in_session, "payment.authorized", payment_id="pay_A", signature="sig")

        assert outcome == ReconcileOutcome.APPLIED
        assert statuses(result) == ("pending_payment", "authorized")

        def _read(s):
            p = s.get(PaymentModel, result.payment_id)
            return p.provider_payment_id, p.provider_signature

        assert in_session(_read) == ("pay_A", "sig")

    def test_webhook_authorize_keeps_client_signature(self, in_session, placed_order):
        _, result = placed_order()
        _reconcile(in_session, "payment.authorized", payment_id="pay_A", signature="sig")
        _reconcile(in_session, "payment.authorized", payment_id="pay_A", signature=None)

        assert in_session(lambda s: s.get(PaymentModel, result.payment_id).provider_signature) == "sig"

    def test_verified_client_signature_authorizes(self, in_session, placed_order, statuses):
        _, result = placed_order()
        signature = hmac.new(b"key-secret", b"order_rzp_1|pay_V", hashlib.sha256).hexdigest()

        outcome = in_session(
            lambda s: PaymentService(s).verify_and_authorize("order_rzp_1", "pay_V", signature, "key-secret")
        )

        assert outcome == ReconcileOutcome.APPLIED
        assert statuses(result) == ("pending_payment", "authorized")

    def test_tampered_client_signature_changes_nothing(self, in_session, placed_order, statuses):
        _, result = placed_order()

        with pytest.raises(ProviderVerificationFailed):
            in_session(lambda s: PaymentService(s).verify_and_authorize("order_rzp_1", "pay_V", "00ff", "key-secret"))
        assert statuses(result) == ("pending_payment", "created")

    def test_authorize_then_capture(self, in_session, placed_order, statuses, levels):
        vid, result = placed_order()
        _reconcile(in_session, "payment.authorized")
        _reconcile(in_session, "payment.captured")

        assert statuses(result) == ("paid", "captured")
        assert levels(vid) == (0, 0)

    def test_stale_authorize_after_capture_is_noop(self, in_session, placed_order, statuses):
        _, result = placed_order()
        _reconcile(in_session, "payment.captured")

        assert _reconcile(in_session, "payment.authorized") == ReconcileOutcome.NOOP
        assert statuses(result) == ("paid", "captured")


class TestUnmatched:
    @pytest.mark.parametrize("kind", ["payment.authorized", "payment.captured", "payment.failed"])
    def test_unknown_provider_order_is_not_an_error(self, in_session, kind):
        assert _reconcile(in_session, kind, order_id="order_missing") == ReconcileOutcome.NOT_FOUND

    def test_unrecognized_event_kind_is_ignored(self, in_session, placed_order, statuses, levels):
        vid, result = placed_order()

        assert _reconcile(in_session, "refund.processed") == ReconcileOutcome.IGNORED
        assert statuses(result) == ("pending_payment", "created")
        assert levels(vid) == (2, 2)

    def test_record_provider_order_id_for_missing_payment(self, in_session):
        with pytest.raises(NotFound):
            in_session(lambda s: PaymentService(s).record_provider_order_id(uuid.uuid4(), "order_x"))

    def test_provider_order_id_already_taken(self, in_session, placed_order):
        placed_order("order_taken")
        _, second = placed_order("order_other")

        with pytest.raises(InvalidInput):
            in_session(lambda s: PaymentService(s).record_provider_order_id(second.payment_id, "order_taken"))

        provider_order_id = in_session(lambda s: s.get(PaymentModel, second.payment_id).provider_order_id)
        assert provider_order_id == "order_other"


def test_order_moved_elsewhere_keeps_inventory(in_session, placed_order, statuses, levels):
    vid, result = placed_order()

    def _force_paid(s):
        s.get(OrderModel, result.order_id).status = "paid"
        s.commit()

    in_session(_force_paid)

    assert _reconcile(in_session, "payment.failed") == ReconcileOutcome.APPLIED
    assert statuses(result) == ("paid", "failed")
    assert levels(vid) == (2, 2)
