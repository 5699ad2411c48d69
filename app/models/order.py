from typing import List, Optional
from decimal import Decimal
from datetime import datetime
from sqlmodel import Field, Relationship, SQLModel
from enum import Enum
from app.core.utils import utc_now

class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self is not OrderStatus.PENDING

class OrderItem(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: Optional[int] = Field(default=None, foreign_key="order.id", index=True)

    # Historical snapshot; the product may later be renamed, re-priced or retired
    product_id: int = Field(index=True)
    product_name: str
    quantity: int
    price: Decimal = Field(max_digits=10, decimal_places=2)

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity

class Order(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    # Customer
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None

    # Shipping
    shipping_address: str
    shipping_city: str
    shipping_zip: str

    # Fixed at creation
    total_amount: Decimal = Field(max_digits=12, decimal_places=2)
    status: OrderStatus = Field(default=OrderStatus.PENDING, index=True)

    # Provenance only, the cart row is gone once the order exists
    cart_id: Optional[int] = None

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)

    # Relationships
    items: List["OrderItem"] = Relationship(
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "OrderItem.id"}
    )
