#app/api/routers/carts.py
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.errors import CartClosed, InvalidInput, NotFound, TransientIO
from app.domain.schemas import CartCreatedOut, CartItemIn, CartOut, OkOut
from app.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.post("", response_model=CartCreatedOut, status_code=201)
def create_cart(db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return {"cart_id": svc.create_cart()}
    except TransientIO as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/{cart_id}", response_model=CartOut)
def get_cart(cart_id: UUID, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_cart(cart_id)
    except NotFound:
        raise HTTPException(status_code=404, detail="cart not found")


@router.post("/{cart_id}/items", response_model=OkOut)
def upsert_item(cart_id: UUID, payload: CartItemIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        svc.upsert_item(cart_id, payload.variant_id, payload.quantity)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CartClosed as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TransientIO as e:
        raise HTTPException(status_code=503, detail=str(e))
    return {"ok": True}


@router.delete("/{cart_id}/items/{variant_id}", response_model=OkOut)
def delete_item(cart_id: UUID, variant_id: UUID, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        svc.delete_item(cart_id, variant_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CartClosed as e:
        raise HTTPException(status_code=409, detail=str(e))
    except TransientIO as e:
        raise HTTPException(status_code=503, detail=str(e))
    return {"ok": True}
