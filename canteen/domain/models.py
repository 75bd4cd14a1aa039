# canteen/domain/models.py
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"
    CANTEEN_STAFF = "canteen_staff"


STAFF_ROLES = frozenset({Role.ADMIN, Role.SUPER_ADMIN, Role.CANTEEN_STAFF})
ADMIN_ROLES = frozenset({Role.ADMIN, Role.SUPER_ADMIN})


class OrderStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class Principal(BaseModel):
    """Zalogowany uzytkownik, tak jak widzi go identity service."""

    uid: str
    email: str | None = None
    display_name: str | None = None
    role: Role = Role.USER
    # tylko dla canteen_staff
    canteen_id: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES


class Canteen(BaseModel):
    canteen_id: str
    name: str
    location: str = ""
    is_active: bool = True


class MenuItem(BaseModel):
    item_id: str
    name: str
    description: str = ""
    price: Decimal = Field(..., ge=0)
    image_ref: str | None = None
    category: str = ""
    canteen_id: str
    canteen_name: str
    is_available: bool = True


class CartLine(BaseModel):
    item_id: str
    name: str
    description: str = ""
    price: Decimal = Field(..., ge=0)
    image_ref: str | None = None
    category: str = ""
    canteen_id: str
    canteen_name: str
    quantity: int = Field(1, ge=1)

    @classmethod
    def from_menu_item(cls, item: MenuItem, quantity: int = 1) -> "CartLine":
        return cls(
            item_id=item.item_id,
            name=item.name,
            description=item.description,
            price=item.price,
            image_ref=item.image_ref,
            category=item.category,
            canteen_id=item.canteen_id,
            canteen_name=item.canteen_name,
            quantity=quantity,
        )


class Cart(BaseModel):
    user_id: str | None = None
    lines: list[CartLine] = Field(default_factory=list)

    def find(self, item_id: str) -> CartLine | None:
        return next((line for line in self.lines if line.item_id == item_id), None)

    def canteen_ids(self) -> set[str]:
        return {line.canteen_id for line in self.lines}

    def total_price(self) -> Decimal:
        return sum((line.price * line.quantity for line in self.lines), Decimal("0.00"))

    def total_items(self) -> int:
        return sum(line.quantity for line in self.lines)


class OrderItem(BaseModel):
    """Kopia linii koszyka w momencie zamowienia, niezalezna od menu."""

    item_id: str
    name: str
    description: str = ""
    price: Decimal
    quantity: int
    image_ref: str | None = None
    category: str = ""

    model_config = ConfigDict(frozen=True)


class Order(BaseModel):
    order_id: str | None = None
    user_id: str
    user_email: str | None = None
    customer_name: str | None = None
    canteen_id: str
    canteen_name: str
    items: Tuple[OrderItem, ...]
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal
    status: OrderStatus = OrderStatus.PENDING
    payment_method: str | None = None
    payment_status: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(frozen=True)
