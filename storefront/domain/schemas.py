# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from storefront.domain.status import OrderStatus, PaymentMethod


class RequestContext(BaseModel):
    """Tozsamosc z providera auth, przekazywana jawnie do serwisow."""

    user_id: str = Field(..., min_length=1)
    email: Optional[str] = None
    role: str = "customer"

    model_config = ConfigDict(frozen=True)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class CartItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0, description="Ilość produktu (musi być > 0)")


class CartLineOut(BaseModel):
    product_id: str
    name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class CartOut(BaseModel):
    cart_id: Optional[str] = None
    customer_id: str
    items: List[CartLineOut]
    subtotal: Decimal
    delivery_fee: Decimal
    total: Decimal


class OrderItemIn(BaseModel):
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0, description="Ilość produktu (musi być > 0)")
    # opcjonalnie cena widziana przez klienta, musi sie zgadzac z katalogiem
    unit_price: Optional[Decimal] = None


class OrderCreate(BaseModel):
    """Schema dla tworzenia zamówienia."""

    shipping_address_id: str = Field(..., min_length=1)
    items: List[OrderItemIn]
    # brak = oplata z ustawien sklepu; podana musi byc z nimi zgodna
    delivery_fee: Optional[Decimal] = None
    payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY
    total_amount: Optional[Decimal] = None
    notes: Optional[str] = Field(default=None, max_length=1000)


class CheckoutIn(BaseModel):
    payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY
    shipping_address_id: Optional[str] = None
    notes: Optional[str] = Field(default=None, max_length=1000)


class OrderCreatedOut(BaseModel):
    order_id: str


class StatusUpdateIn(BaseModel):
    # walidacja wartosci w serwisie, zeby zwrocic 400 a nie 422
    status: str = Field(..., min_length=1)


class TotalCorrectionIn(BaseModel):
    total_amount: Decimal = Field(..., ge=0)
    reason: str = Field(..., min_length=1, max_length=500)


class DeliveryFeeIn(BaseModel):
    delivery_fee: Decimal = Field(..., ge=0)


class DeliveryFeeOut(BaseModel):
    delivery_fee: Decimal


class SuccessOut(BaseModel):
    success: bool = True


class OrderItemOut(BaseModel):
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class ShippingAddressOut(BaseModel):
    address_id: Optional[str] = None
    address_line_1: Optional[str] = None
    address_line_2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    phone_number: Optional[str] = None


class OrderOut(BaseModel):
    """Schema dla zamówienia (response)."""

    id: str
    customer_id: str
    status: OrderStatus
    payment_method: str
    total_amount: Decimal
    delivery_fee: Decimal
    order_date: datetime
    document_url: Optional[str] = None
    notes: Optional[str] = None
    shipping_address: ShippingAddressOut
    items: List[OrderItemOut]

    model_config = ConfigDict(from_attributes=True)


class OrderPageOut(BaseModel):
    orders: List[OrderOut]
    total: int
    page: int
    limit: int


class OrderStatsOut(BaseModel):
    total: int
    pending: int
    awaiting_payment: int
    confirmed: int
    processing: int
    shipped: int
    delivered: int
    cancelled: int
    today_orders: int
    total_revenue: Decimal
