# app/domain/schemas.py
from datetime import datetime
from typing import Any, Dict, List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# =====================================================
# CART
# =====================================================
class CartCreatedOut(BaseModel):
    cart_id: UUID


class CartItemIn(BaseModel):
    """Schema dla ustawienia ilosci wariantu w koszyku."""

    variant_id: UUID
    quantity: int = Field(..., ge=1, le=20, description="Ilosc 1..20")


class CartItemOut(BaseModel):
    variant_id: UUID
    sku: str
    product_name: str
    variant_title: str
    unit_price: int
    quantity: int
    line_total: int


class CartOut(BaseModel):
    id: UUID
    status: str
    items: List[CartItemOut]
    subtotal: int

    model_config = ConfigDict(from_attributes=True)


class OkOut(BaseModel):
    ok: bool = True


# =====================================================
# CHECKOUT
# =====================================================
class Customer(BaseModel):
    """Migawka danych klienta; adres to dokument przekazywany bez zmian."""

    name: str = Field(..., min_length=1, max_length=200)
    phone: str = Field(..., min_length=1, max_length=40)
    email: str = Field("", max_length=200)
    shipping_address: Dict[str, Any] | None = None


class CheckoutIn(BaseModel):
    cart_id: UUID
    customer_name: str = Field(..., min_length=1, max_length=200)
    customer_phone: str = Field(..., min_length=1, max_length=40)
    customer_email: str = Field("", max_length=200)
    shipping_address: Dict[str, Any] | None = None

    def customer(self) -> Customer:
        return Customer(
            name=self.customer_name,
            phone=self.customer_phone,
            email=self.customer_email,
            shipping_address=self.shipping_address,
        )


class CheckoutResult(BaseModel):
    order_id: UUID
    payment_id: UUID
    amount: int
    currency: str
    provider: str


class RazorpayCheckoutOut(BaseModel):
    key_id: str
    order_id: str
    amount: int
    currency: str


class CheckoutOut(CheckoutResult):
    razorpay: RazorpayCheckoutOut | None = None


# =====================================================
# PAYMENTS
# =====================================================
class RazorpayVerifyIn(BaseModel):
    razorpay_order_id: str = Field(..., min_length=1)
    razorpay_payment_id: str = Field(..., min_length=1)
    razorpay_signature: str = Field(..., min_length=1)


class ReconcileOut(BaseModel):
    ok: bool = True
    outcome: str
    queued: bool = False


# =====================================================
# ADMIN
# =====================================================
class VariantCreate(BaseModel):
    sku: str = Field(..., min_length=1, max_length=64)
    title: str = Field("", max_length=200)
    size: str = Field("", max_length=20)
    color: str = Field("", max_length=40)
    price: int = Field(..., ge=0, description="Cena w jednostkach minor")
    compare_at_price: int | None = Field(None, ge=0)
    on_hand: int = Field(0, ge=0)


class VariantUpdate(BaseModel):
    """Pelna podmiana pol wariantu (bez sku i stanu magazynu)."""

    title: str = Field("", max_length=200)
    size: str = Field("", max_length=20)
    color: str = Field("", max_length=40)
    price: int = Field(..., ge=0)
    compare_at_price: int | None = Field(None, ge=0)


class ProductCreate(BaseModel):
    slug: str = Field(..., min_length=1, max_length=200)
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    status: str = Field("draft", pattern="^(draft|active|archived)$")
    variants: List[VariantCreate] = Field(..., min_length=1)


class VariantOut(BaseModel):
    id: UUID
    sku: str
    title: str
    size: str
    color: str
    price: int
    compare_at_price: int | None = None
    on_hand: int
    reserved: int


class ProductOut(BaseModel):
    id: UUID
    slug: str
    name: str
    description: str
    status: str
    variants: List[VariantOut]


class InventoryAdjustIn(BaseModel):
    variant_id: UUID
    delta: int


class InventoryLevels(BaseModel):
    variant_id: UUID
    on_hand: int
    reserved: int


class OrderSummaryOut(BaseModel):
    id: UUID
    status: str
    total: int
    currency: str
    created_at: datetime


class OrderListOut(BaseModel):
    orders: List[OrderSummaryOut]


class OrderItemOut(CartItemOut):
    pass


class OrderOut(BaseModel):
    """Schema dla zamowienia (response)."""

    id: UUID
    status: str
    currency: str
    subtotal: int
    shipping: int
    tax: int
    total: int
    customer_name: str
    customer_phone: str
    customer_email: str
    shipping_address: Dict[str, Any] | None = None
    items: List[OrderItemOut]
    payment_status: str
    provider_order_id: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
