from typing import List, Optional
from decimal import Decimal
from pydantic import BaseModel

class CartItemCreate(BaseModel):
    product_id: int
    quantity: int = 1

class CartItemResponse(BaseModel):
    id: Optional[int]
    product_id: int
    product_name: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal

class CartResponse(BaseModel):
    id: Optional[int]
    session_id: str
    total_amount: Decimal
    total_items: int
    items: List[CartItemResponse]
