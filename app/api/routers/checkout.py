# app/api/routers/checkout.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.errors import (
    CartClosed,
    EmptyCart,
    InsufficientStock,
    InvalidInput,
    NotFound,
    PaymentProviderError,
    TransientIO,
)
from app.domain.schemas import CheckoutIn, CheckoutOut, RazorpayCheckoutOut
from app.services.checkout_service import CheckoutService
from app.services.payment_service import PaymentService
from app.services.razorpay_client import RazorpayClient
from app.utils import settings
from app.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["checkout"])


def get_razorpay_client() -> RazorpayClient:
    return RazorpayClient(key_id=settings.RAZORPAY_KEY_ID, key_secret=settings.RAZORPAY_KEY_SECRET)


@router.post("/checkout", response_model=CheckoutOut, status_code=201)
def checkout(
    payload: CheckoutIn,
    db: Session = Depends(get_db),
    razorpay: RazorpayClient = Depends(get_razorpay_client),
):
    """
    Checkout koszyka, a gdy Razorpay jest skonfigurowany - zalozenie
    zamowienia u dostawcy i zapisanie jego id na platnosci.
    """
    try:
        result = CheckoutService(db).checkout(
            payload.cart_id,
            payload.customer(),
            settings.SHIPPING_FLAT,
            settings.TAX_RATE_BPS,
        )
    except NotFound as e:
        # brak koszyka albo wiersza magazynu dla wariantu
        raise HTTPException(status_code=404, detail=str(e))
    except InsufficientStock:
        raise HTTPException(status_code=409, detail="insufficient stock")
    except CartClosed as e:
        raise HTTPException(status_code=409, detail=str(e))
    except (EmptyCart, InvalidInput) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TransientIO as e:
        raise HTTPException(status_code=503, detail=str(e))

    out = CheckoutOut(**result.model_dump())
    if not razorpay.configured:
        return out

    try:
        provider_order_id = razorpay.create_order(result.amount, result.currency, str(result.order_id))
    except PaymentProviderError as e:
        logger.error(f"Zamowienie u dostawcy dla {result.order_id} nieudane: {e}")
        raise HTTPException(status_code=502, detail="failed to create razorpay order")

    try:
        PaymentService(db).record_provider_order_id(result.payment_id, provider_order_id)
    except (NotFound, InvalidInput, TransientIO) as e:
        logger.error(f"Nie zapisano zamowienia dostawcy {provider_order_id}: {e}")
        raise HTTPException(status_code=500, detail="failed to persist razorpay order")

    out.razorpay = RazorpayCheckoutOut(
        key_id=razorpay.key_id,
        order_id=provider_order_id,
        amount=result.amount,
        currency=result.currency,
    )
    return out
