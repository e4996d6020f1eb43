# app/tasks/reconcile.py
from app.celery_worker import celery_app
from app.data.database import SessionLocal
from app.domain.errors import TransientIO
from app.services.payment_service import PaymentService
from app.utils.settings import RECONCILE_MAX_RETRIES
from app.utils.logging import get_logger

logger = get_logger(__name__)


@celery_app.task(
    name="app.tasks.reconcile.reconcile_payment_task",
    autoretry_for=(TransientIO,),
    retry_backoff=True,
    retry_backoff_max=300,
    max_retries=RECONCILE_MAX_RETRIES,
)
def reconcile_payment_task(
    kind: str,
    provider_order_id: str,
    provider_payment_id: str,
    signature: str | None = None,
):
    """
    Ponowienie przejscia platnosci, ktore webhook przerwal przez TransientIO.
    Przejscia sa idempotentne, wiec kolejne proby sa bezpieczne.
    """
    logger.info(f"Reconcile task {kind} for {provider_order_id} started")

    db = SessionLocal()
    try:
        outcome = PaymentService(db).reconcile(kind, provider_order_id, provider_payment_id, signature)
    finally:
        db.close()

    logger.info(f"Reconcile task {kind} for {provider_order_id}: {outcome.value}")
    return {"kind": kind, "provider_order_id": provider_order_id, "outcome": outcome.value}
