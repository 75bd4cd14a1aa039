# canteen/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from canteen.domain.models import CartLine, OrderItem, OrderStatus, Role
from canteen.utils.settings import MAX_ITEM_QUANTITY


class UserCreate(BaseModel):
    """Schema dla rejestracji uzytkownika."""

    uid: str = Field(..., min_length=1, max_length=128)
    email: str | None = Field(None, max_length=254)
    display_name: str | None = Field(None, max_length=100)
    role: Role = Role.USER
    canteen_id: str | None = None


class UserRead(BaseModel):
    uid: str
    email: str | None = None
    display_name: str | None = None
    role: Role
    canteen_id: str | None = None

    model_config = ConfigDict(from_attributes=True)


class CanteenCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    location: str = Field("", max_length=200)


class CanteenOut(BaseModel):
    canteen_id: str
    name: str
    location: str
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class MenuItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field("", max_length=500)
    price: Decimal = Field(..., ge=0, decimal_places=2)
    category: str = Field("", max_length=50)
    image_ref: str | None = None


class MenuItemOut(BaseModel):
    item_id: str
    name: str
    description: str
    price: Decimal
    category: str
    image_ref: str | None = None
    canteen_id: str
    canteen_name: str

    model_config = ConfigDict(from_attributes=True)


class ItemIn(BaseModel):
    """Schema dla dodawania pozycji menu do koszyka."""

    canteen_id: str = Field(..., min_length=1)
    item_id: str = Field(..., min_length=1)
    quantity: int = Field(1, gt=0, le=MAX_ITEM_QUANTITY)


class QuantityIn(BaseModel):
    # 0 usuwa pozycje
    quantity: int = Field(..., ge=0, le=MAX_ITEM_QUANTITY)


class CartOut(BaseModel):
    user_id: str | None
    lines: List[CartLine]
    total_price: Decimal
    total_items: int
    warning: str | None = None


class CheckoutIn(BaseModel):
    payment_method: str | None = Field(None, min_length=1, max_length=32)


class StatusChangeIn(BaseModel):
    status: OrderStatus


class OrderOut(BaseModel):
    order_id: str
    user_id: str
    customer_name: str | None = None
    canteen_id: str
    canteen_name: str
    items: List[OrderItem]
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal
    status: OrderStatus
    payment_method: str | None = None
    payment_status: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
