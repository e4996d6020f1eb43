# app/api/routers/payments.py
import json

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.errors import ProviderVerificationFailed, TransientIO
from app.domain.schemas import RazorpayVerifyIn, ReconcileOut
from app.services.payment_service import PaymentService
from app.services.razorpay_client import verify_webhook_signature
from app.tasks.reconcile import reconcile_payment_task
from app.utils import settings
from app.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["payments"])


@router.post("/payments/razorpay/verify", response_model=ReconcileOut)
def verify_payment(payload: RazorpayVerifyIn, db: Session = Depends(get_db)):
    """Synchroniczna weryfikacja od klienta po Razorpay Checkout -> authorized."""
    if not settings.RAZORPAY_KEY_SECRET:
        raise HTTPException(status_code=400, detail="razorpay not configured")

    try:
        outcome = PaymentService(db).verify_and_authorize(
            payload.razorpay_order_id,
            payload.razorpay_payment_id,
            payload.razorpay_signature,
            settings.RAZORPAY_KEY_SECRET,
        )
    except ProviderVerificationFailed:
        logger.warning(f"Bledny podpis platnosci dla {payload.razorpay_order_id}")
        raise HTTPException(status_code=401, detail="invalid signature")
    except TransientIO:
        raise HTTPException(status_code=503, detail="failed to persist payment")

    return {"ok": True, "outcome": outcome.value}


def _payment_entity(event: dict) -> dict:
    # payload.payment.entity; kazdy inny ksztalt traktujemy jak brak danych
    payload = event.get("payload")
    payment = payload.get("payment") if isinstance(payload, dict) else None
    entity = payment.get("entity") if isinstance(payment, dict) else None
    return entity if isinstance(entity, dict) else {}


@router.post("/webhooks/razorpay", response_model=ReconcileOut)
async def razorpay_webhook(
    request: Request,
    x_razorpay_signature: str | None = Header(default=None),
    db: Session = Depends(get_db),
):
    """
    Webhook dostawcy. Zawsze potwierdzamy (200) zdarzenia, ktorych nie obslugujemy,
    zeby dostawca ich nie ponawial. TransientIO -> ponowienie w Celery (202).
    """
    if not settings.RAZORPAY_WEBHOOK_SECRET:
        raise HTTPException(status_code=400, detail="webhook not configured")
    if not x_razorpay_signature:
        raise HTTPException(status_code=400, detail="missing signature header")

    body = await request.body()
    if not verify_webhook_signature(body, x_razorpay_signature, settings.RAZORPAY_WEBHOOK_SECRET):
        logger.warning("Bledny podpis webhooka")
        raise HTTPException(status_code=401, detail="invalid webhook signature")

    try:
        event = json.loads(body)
    except ValueError:
        raise HTTPException(status_code=400, detail="invalid json")
    if not isinstance(event, dict):
        raise HTTPException(status_code=400, detail="invalid json")

    kind = event.get("event")
    if not isinstance(kind, str):
        kind = ""
    entity = _payment_entity(event)
    provider_order_id = entity.get("order_id")
    provider_payment_id = entity.get("id")

    if not (isinstance(provider_order_id, str) and provider_order_id) or not (
        isinstance(provider_payment_id, str) and provider_payment_id
    ):
        return {"ok": True, "outcome": "ignored"}

    try:
        outcome = await run_in_threadpool(
            PaymentService(db).reconcile, kind, provider_order_id, provider_payment_id
        )
    except TransientIO as e:
        logger.error(f"Webhook {kind} dla {provider_order_id} przerwany: {e}, kolejkuje ponowienie")
        try:
            reconcile_payment_task.apply_async(args=(kind, provider_order_id, provider_payment_id))
        except Exception as enqueue_error:
            logger.error(f"Nie udalo sie zakolejkowac ponowienia: {enqueue_error}")
            # dostawca ponowi dostarczenie
            raise HTTPException(status_code=503, detail="temporarily unavailable")
        return JSONResponse(status_code=202, content={"ok": True, "outcome": "queued", "queued": True})

    return {"ok": True, "outcome": outcome.value}
