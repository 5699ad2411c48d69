from typing import Optional
from decimal import Decimal
from datetime import datetime
from sqlmodel import Field, SQLModel
from sqlalchemy import CheckConstraint
from app.core.utils import utc_now

class Product(SQLModel, table=True):
    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_product_stock_non_negative"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    # Basic Info
    name: str = Field(index=True, unique=True)
    description: Optional[str] = None

    # Pricing
    price: Decimal = Field(default=Decimal("0.00"), max_digits=10, decimal_places=2)

    # Inventory, only checkout and payment reconciliation decrement or restock it
    stock: int = Field(default=0, ge=0)

    # Metadata
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
