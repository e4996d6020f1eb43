# app/services/payment_service.py
from enum import Enum

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.database import atomic
from app.data.models.order import OrderStatus
from app.data.models.payment import PaymentModel, PaymentStatus
from app.domain.errors import InvalidInput, NotFound, ProviderVerificationFailed
from app.repos.order_repo import OrderRepo
from app.repos.payment_repo import PaymentRepo
from app.services.inventory_ledger import InventoryLedger
from app.services.razorpay_client import verify_payment_signature
from app.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentEvent:
    AUTHORIZED = "payment.authorized"
    CAPTURED = "payment.captured"
    FAILED = "payment.failed"


class ReconcileOutcome(str, Enum):
    APPLIED = "applied"
    NOOP = "noop"  # platnosc juz w stanie koncowym
    NOT_FOUND = "not_found"
    IGNORED = "ignored"  # nieznany typ zdarzenia


class PaymentService:
    """
    Maszyna stanow platnosci: created -> authorized -> captured,
    albo created|authorized -> failed.

    Kazde przejscie to osobna transakcja, kluczowana id zamowienia u dostawcy
    i serializowana blokada wiersza platnosci. Dostawca dostarcza zdarzenia
    at-least-once, wiec powtorka zdarzenia konczy sie sukcesem bez zmian.
    Podpis webhooka sprawdza router, podpis z Checkout - verify_and_authorize.
    """

    def __init__(self, db: Session):
        self.db = db
        self.payments = PaymentRepo(db)
        self.orders = OrderRepo(db)
        self.ledger = InventoryLedger(db)

    def record_provider_order_id(self, payment_id, provider_order_id: str) -> None:
        try:
            with atomic(self.db):
                payment = self.payments.lock_payment(payment_id)
                if payment is None:
                    raise NotFound(f"payment {payment_id} not found")
                payment.provider_order_id = provider_order_id
                self.db.flush()
        except IntegrityError as e:
            # provider_order_id jest unikalne - juz przypisane innej platnosci
            raise InvalidInput(f"provider order {provider_order_id} already recorded") from e

        logger.info(f"Platnosc {payment_id} -> zamowienie dostawcy {provider_order_id}")

    def reconcile(
        self,
        kind: str,
        provider_order_id: str,
        provider_payment_id: str,
        signature: str | None = None,
    ) -> ReconcileOutcome:
        if kind == PaymentEvent.AUTHORIZED:
            return self.mark_authorized(provider_order_id, provider_payment_id, signature)
        if kind == PaymentEvent.CAPTURED:
            return self.mark_captured(provider_order_id, provider_payment_id)
        if kind == PaymentEvent.FAILED:
            return self.mark_failed(provider_order_id, provider_payment_id)

        logger.info(f"Zdarzenie {kind} dla {provider_order_id} zignorowane")
        return ReconcileOutcome.IGNORED

    def mark_authorized(
        self,
        provider_order_id: str,
        provider_payment_id: str,
        signature: str | None = None,
    ) -> ReconcileOutcome:
        with atomic(self.db):
            payment = self.payments.lock_by_provider_order(provider_order_id)
            if payment is None:
                outcome = ReconcileOutcome.NOT_FOUND
            elif payment.status in PaymentStatus.TERMINAL:
                outcome = ReconcileOutcome.NOOP
            else:
                payment.status = PaymentStatus.AUTHORIZED
                payment.provider_payment_id = provider_payment_id
                # webhook nie niesie podpisu - nie nadpisuj tego z weryfikacji klienta
                if signature:
                    payment.provider_signature = signature
                outcome = ReconcileOutcome.APPLIED

        self._log_outcome(PaymentEvent.AUTHORIZED, provider_order_id, outcome)
        return outcome

    def verify_and_authorize(
        self,
        provider_order_id: str,
        provider_payment_id: str,
        signature: str,
        key_secret: str,
    ) -> ReconcileOutcome:
        if not verify_payment_signature(provider_order_id, provider_payment_id, signature, key_secret):
            raise ProviderVerificationFailed(f"invalid payment signature for {provider_order_id}")
        return self.mark_authorized(provider_order_id, provider_payment_id, signature)

    def mark_captured(self, provider_order_id: str, provider_payment_id: str) -> ReconcileOutcome:
        return self._settle(
            PaymentEvent.CAPTURED,
            provider_order_id,
            provider_payment_id,
            payment_status=PaymentStatus.CAPTURED,
            order_status=OrderStatus.PAID,
            apply_line=self.ledger.consume,
        )

    def mark_failed(self, provider_order_id: str, provider_payment_id: str) -> ReconcileOutcome:
        return self._settle(
            PaymentEvent.FAILED,
            provider_order_id,
            provider_payment_id,
            payment_status=PaymentStatus.FAILED,
            order_status=OrderStatus.FAILED,
            apply_line=self.ledger.release,
        )

    def _settle(
        self,
        event: str,
        provider_order_id: str,
        provider_payment_id: str,
        payment_status: str,
        order_status: str,
        apply_line,
    ) -> ReconcileOutcome:
        """
        Wspolna sciezka capture/failed:
        platnosc -> stan koncowy, zamowienie (tylko z pending_payment),
        dla kazdej linii consume albo release. Jedna transakcja.
        """
        with atomic(self.db):
            payment = self.payments.lock_by_provider_order(provider_order_id)
            if payment is None:
                outcome = ReconcileOutcome.NOT_FOUND
            elif payment.status in PaymentStatus.TERMINAL:
                if payment.status != payment_status:
                    # np. capture po failed - pieniadze pobrane dla zamknietego zamowienia
                    logger.warning(
                        f"{event} dla platnosci {payment.id} w stanie {payment.status}, pomijam"
                    )
                outcome = ReconcileOutcome.NOOP
            else:
                self._apply_settlement(payment, provider_payment_id, payment_status, order_status, apply_line)
                outcome = ReconcileOutcome.APPLIED

        self._log_outcome(event, provider_order_id, outcome)
        return outcome

    def _apply_settlement(
        self,
        payment: PaymentModel,
        provider_payment_id: str,
        payment_status: str,
        order_status: str,
        apply_line,
    ) -> None:
        payment.status = payment_status
        payment.provider_payment_id = provider_payment_id

        order = self.orders.get_order(payment.order_id)
        moved = order is not None and self.orders.set_status_if(
            order, OrderStatus.PENDING_PAYMENT, order_status
        )
        if not moved:
            # rezerwacje zamowienia spoza pending_payment zostaly juz rozliczone
            logger.warning(
                f"Zamowienie {payment.order_id} nie jest {OrderStatus.PENDING_PAYMENT}, "
                f"magazyn bez zmian"
            )
            return

        for item in self.orders.get_order_items(order.id):
            apply_line(item.variant_id, item.quantity)

    @staticmethod
    def _log_outcome(event: str, provider_order_id: str, outcome: ReconcileOutcome) -> None:
        if outcome == ReconcileOutcome.NOT_FOUND:
            logger.warning(f"{event}: brak platnosci dla zamowienia dostawcy {provider_order_id}")
        elif outcome == ReconcileOutcome.NOOP:
            logger.info(f"{event}: {provider_order_id} juz rozliczone, bez zmian")
        else:
            logger.info(f"{event}: {provider_order_id} zastosowane")
