from typing import List, Optional
from decimal import Decimal
from datetime import datetime
from pydantic import BaseModel, ConfigDict
from app.models.order import Order, OrderStatus
from app.schemas.common import Page

class OrderRequest(BaseModel):
    session_id: str
    customer_name: str
    # Format is checked by the checkout itself, inside its unit of work
    customer_email: str
    customer_phone: Optional[str] = None
    shipping_address: str
    shipping_city: str
    shipping_zip: str

class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    product_name: str
    quantity: int
    price: Decimal
    subtotal: Decimal

class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_name: str
    customer_email: str
    customer_phone: Optional[str]
    shipping_address: str
    shipping_city: str
    shipping_zip: str
    total_amount: Decimal
    status: OrderStatus
    cart_id: Optional[int]
    created_at: datetime
    items: List[OrderItemResponse]

    @classmethod
    def from_entity(cls, order: Order) -> "OrderResponse":
        return cls.model_validate(order)

OrderPage = Page[OrderResponse]
