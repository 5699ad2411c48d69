from typing import List, Optional
from decimal import Decimal
from datetime import datetime
from sqlmodel import Field, Relationship, SQLModel
from app.core.utils import utc_now

class CartItem(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    # References: owning cart and the product, both by id only
    cart_id: Optional[int] = Field(default=None, foreign_key="cart.id", index=True)
    product_id: int = Field(foreign_key="product.id")

    # Cart Details
    quantity: int = Field(default=1, ge=1)
    # Price captured when the product was added, not kept in sync with the catalog
    unit_price: Decimal = Field(max_digits=10, decimal_places=2)

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity

class Cart(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: str = Field(index=True, unique=True)

    # Derived from the lines, recomputed after every mutation
    total_amount: Decimal = Field(default=Decimal("0.00"), max_digits=12, decimal_places=2)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    # Relationships
    items: List["CartItem"] = Relationship(
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "CartItem.id"}
    )

    def find_item(self, product_id: int) -> Optional[CartItem]:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    def recalculate_total(self) -> Decimal:
        self.total_amount = sum((item.subtotal for item in self.items), Decimal("0.00"))
        return self.total_amount
