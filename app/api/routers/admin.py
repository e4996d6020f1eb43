# app/api/routers/admin.py
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import require_admin
from app.data.database import get_db
from app.domain.errors import InvalidInput, NegativeStock, NotFound, TransientIO
from app.domain.schemas import (
    InventoryAdjustIn,
    InventoryLevels,
    OrderListOut,
    OrderOut,
    ProductCreate,
    ProductOut,
    VariantCreate,
    VariantOut,
    VariantUpdate,
)
from app.services.catalog_service import CatalogService
from app.services.inventory_service import InventoryService
from app.services.order_service import OrderService

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.post("/products", response_model=ProductOut, status_code=201)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    try:
        return CatalogService(db).create_product(payload)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TransientIO as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.post("/products/{product_id}/variants", response_model=VariantOut, status_code=201)
def add_variant(product_id: UUID, payload: VariantCreate, db: Session = Depends(get_db)):
    try:
        return CatalogService(db).add_variant(product_id, payload)
    except NotFound:
        raise HTTPException(status_code=404, detail="product not found")
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TransientIO as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.put("/variants/{variant_id}", response_model=VariantOut)
def update_variant(variant_id: UUID, payload: VariantUpdate, db: Session = Depends(get_db)):
    try:
        return CatalogService(db).update_variant(variant_id, payload)
    except NotFound:
        raise HTTPException(status_code=404, detail="variant not found")
    except TransientIO as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.post("/inventory/adjust", response_model=InventoryLevels)
def adjust_inventory(payload: InventoryAdjustIn, db: Session = Depends(get_db)):
    try:
        return InventoryService(db).adjust(payload.variant_id, payload.delta)
    except NotFound:
        raise HTTPException(status_code=404, detail="inventory not found")
    except NegativeStock as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TransientIO as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/orders", response_model=OrderListOut)
def list_orders(limit: int = 50, db: Session = Depends(get_db)):
    # limit spoza 1..200 -> domyslne 50 (OrderService)
    return {"orders": OrderService(db).list_orders(limit)}


@router.get("/orders/{order_id}", response_model=OrderOut)
def get_order(order_id: UUID, db: Session = Depends(get_db)):
    try:
        return OrderService(db).get_order(order_id)
    except NotFound:
        raise HTTPException(status_code=404, detail="order not found")
