from typing import Optional
from datetime import datetime
from sqlmodel import Field, SQLModel
from enum import Enum
from app.core.utils import utc_now

class NotificationOutcome(str, Enum):
    APPLIED = "applied"
    IGNORED = "ignored"

class PaymentNotification(SQLModel, table=True):
    """One row per processed gateway notification, keyed by correlation id."""

    id: Optional[int] = Field(default=None, primary_key=True)

    # Idempotency key supplied by the caller
    correlation_id: str = Field(unique=True, index=True)

    # References
    order_id: int = Field(foreign_key="order.id", index=True)

    # Raw gateway status (approved, rejected, cancelled)
    payment_status: str
    outcome: NotificationOutcome

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now)
