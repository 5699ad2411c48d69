from typing import Optional
from pydantic import BaseModel
from app.models.order import OrderStatus
from app.models.payment import NotificationOutcome

class PaymentResult(BaseModel):
    order_id: int
    correlation_id: str
    payment_status: str
    order_status: OrderStatus
    outcome: NotificationOutcome
    duplicate: bool = False
    restocked: Optional[int] = None
