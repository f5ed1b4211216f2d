# storefront/domain/schemas.py
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field


# ---------- auth / account ----------

class RegisterIn(BaseModel):
    """Schema for account registration."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    phone: str | None = Field(None, max_length=20)


class LoginIn(BaseModel):
    email: EmailStr
    password: str


class UserRead(BaseModel):
    id: int
    name: str
    email: str
    phone: str | None = None
    date_of_birth: date | None = None
    gender: str | None = None
    is_admin: bool = False

    model_config = ConfigDict(from_attributes=True)


class TokenOut(BaseModel):
    token: str
    user: UserRead


class ProfileUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    phone: str | None = Field(None, max_length=20)
    date_of_birth: date | None = None
    gender: str | None = Field(None, max_length=20)


class AddressIn(BaseModel):
    """Schema for creating/updating a saved address."""

    type: Literal["billing", "shipping"]
    full_name: str = Field(..., min_length=1, max_length=255)
    company: str | None = Field(None, max_length=255)
    address_line_1: str = Field(..., min_length=1, max_length=255)
    address_line_2: str | None = Field(None, max_length=255)
    city: str = Field(..., min_length=1, max_length=255)
    state: str = Field(..., min_length=1, max_length=255)
    postal_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=1, max_length=255)
    phone: str | None = Field(None, max_length=20)
    is_default: bool = False


class AddressOut(AddressIn):
    id: int

    model_config = ConfigDict(from_attributes=True)


class DeviceOut(BaseModel):
    id: int
    device_name: str
    browser: str | None = None
    platform: str | None = None
    ip_address: str | None = None
    is_current: bool
    last_used_at: datetime
    description: str

    model_config = ConfigDict(from_attributes=True)


# ---------- cart ----------

class CartAddIn(BaseModel):
    """Schema for adding a product to the cart."""

    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., ge=1)
    size: str | None = Field(None, max_length=10)
    color: str | None = Field(None, max_length=20)


class CartUpdateIn(BaseModel):
    quantity: int = Field(..., ge=1)


class CartProductOut(BaseModel):
    id: int
    name: str
    slug: str
    image: str
    in_stock: bool


class CartItemOut(BaseModel):
    id: int
    product: CartProductOut
    quantity: int
    size: str | None = None
    color: str | None = None
    unit_price: Decimal
    total_price: Decimal


class CartSummaryOut(BaseModel):
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal
    item_count: int


class CartOut(BaseModel):
    cart_items: List[CartItemOut]
    cart_summary: CartSummaryOut


class CartMutationOut(BaseModel):
    message: str
    cart_count: int


# ---------- payment ----------

class DeliveryIn(BaseModel):
    id: str = "standard"
    name: str | None = None


class OrderAddressIn(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=255)
    address_line_1: str = Field(..., min_length=1, max_length=255)
    address_line_2: str | None = None
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    postal_code: str | None = None
    country: str | None = None
    phone: str | None = None
    email: EmailStr | None = None


class OrderDataIn(BaseModel):
    shipping: OrderAddressIn
    billing: OrderAddressIn | None = None
    delivery: DeliveryIn = DeliveryIn()
    notes: str | None = Field(None, max_length=2000)


class PaymentInitializeIn(BaseModel):
    """Schema for payment initialization. amount is in minor units (kobo)."""

    order_data: OrderDataIn
    amount: Decimal = Field(..., ge=1)


class PaymentVerifyIn(BaseModel):
    reference: str = Field(..., min_length=1, max_length=100)


# ---------- orders ----------

class OrderItemOut(BaseModel):
    id: int
    product_id: int | None = None
    product_name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    size: str | None = None
    color: str | None = None

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Schema for an order (response)."""

    id: int
    order_number: str
    status: str
    payment_status: str
    subtotal: Decimal
    tax_amount: Decimal
    shipping_amount: Decimal
    total_amount: Decimal
    currency: str
    payment_reference: str | None = None
    payment_method: str | None = None
    shipping_method: str | None = None
    tracking_number: str | None = None
    shipping_address: Dict[str, Any] | None = None
    billing_address: Dict[str, Any] | None = None
    notes: str | None = None
    created_at: datetime
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None
    items: List[OrderItemOut] = []

    model_config = ConfigDict(from_attributes=True)


class OrderStatusUpdateIn(BaseModel):
    status: str
    location: str | None = Field(None, max_length=255)
    description: str | None = None
    tracking_number: str | None = Field(None, max_length=100)


# ---------- wishlist / newsletter ----------

class WishlistIn(BaseModel):
    product_id: int = Field(..., gt=0)


class NewsletterSubscribeIn(BaseModel):
    email: EmailStr = Field(..., max_length=255)
