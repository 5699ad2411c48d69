"""Reconciliation of payment-gateway results against orders.

A notification is applied at most once per correlation id. Only ``PENDING``
orders move: ``approved`` settles them as ``PAID``; ``rejected`` and
``cancelled`` mark them ``CANCELLED`` and put the reserved stock back.
Orders already ``PAID`` or ``CANCELLED`` are never transitioned again, the
notification is recorded as ignored. The transition itself is a guarded
``UPDATE ... WHERE status = PENDING`` so two notifications racing for the
same order cannot both apply.
"""

from typing import Any, Dict, Optional, Tuple

import structlog
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.core.exceptions import InvalidPaymentNotification, OrderNotFound, UnknownPaymentStatus
from app.core.utils import utc_now
from app.db.session import unit_of_work
from app.models.order import Order, OrderStatus
from app.models.payment import NotificationOutcome, PaymentNotification
from app.schemas.payment import PaymentResult
from app.services.inventory import InventoryService

logger = structlog.get_logger(__name__)

STATUS_TRANSITIONS = {
    "approved": OrderStatus.PAID,
    "rejected": OrderStatus.CANCELLED,
    "cancelled": OrderStatus.CANCELLED,
}


def extract_payment_fields(payload: Dict[str, Any]) -> Tuple[int, str]:
    """Pull ``(order_id, status)`` out of a ``{"data": {...}}`` or flat payload."""
    data = payload.get("data") if isinstance(payload.get("data"), dict) else payload

    order_id = data.get("order_id", payload.get("order_id"))
    status = data.get("status", payload.get("status"))
    if order_id is None:
        raise InvalidPaymentNotification("missing order_id")
    if not status:
        raise InvalidPaymentNotification("missing status")
    try:
        return int(order_id), str(status)
    except (TypeError, ValueError):
        raise InvalidPaymentNotification(f"order_id {order_id!r} is not an integer")


class PaymentService:
    def __init__(self, session: Session):
        self.session = session
        self.inventory = InventoryService(session)

    def process_payment_notification(self, payload: Dict[str, Any], correlation_id: str) -> PaymentResult:
        if not correlation_id:
            raise InvalidPaymentNotification("missing correlation id")
        order_id, status = extract_payment_fields(payload)
        return self.process_payment_result(order_id, status, correlation_id)

    def process_payment_result(self, order_id: int, payment_status: str, correlation_id: str) -> PaymentResult:
        try:
            with unit_of_work(self.session):
                previous = self._find_notification(correlation_id)
                if previous is not None:
                    return self._duplicate_result(previous)
                return self._reconcile(order_id, payment_status, correlation_id)
        except IntegrityError:
            # A concurrent delivery of the same correlation id recorded it first
            previous = self._find_notification(correlation_id)
            if previous is None:
                raise
            return self._duplicate_result(previous)

    def _reconcile(self, order_id: int, payment_status: str, correlation_id: str) -> PaymentResult:
        normalized = payment_status.strip().lower()
        target = STATUS_TRANSITIONS.get(normalized)
        if target is None:
            raise UnknownPaymentStatus(payment_status)

        order: Optional[Order] = self.session.exec(
            select(Order)
            .where(Order.id == order_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).first()
        if order is None:
            raise OrderNotFound(order_id)

        restocked = None
        if not order.status.is_terminal and self._transition(order, target):
            outcome = NotificationOutcome.APPLIED
            if target is OrderStatus.CANCELLED:
                restocked = self._restock(order)
            logger.info(
                "Payment notification applied",
                correlation_id=correlation_id,
                order_id=order.id,
                order_status=target.value,
                restocked=restocked,
            )
        else:
            outcome = NotificationOutcome.IGNORED
            logger.info(
                "Payment notification for settled order ignored",
                correlation_id=correlation_id,
                order_id=order.id,
                order_status=order.status.value,
                payment_status=normalized,
            )

        self.session.add(PaymentNotification(
            correlation_id=correlation_id,
            order_id=order.id,
            payment_status=normalized,
            outcome=outcome,
        ))
        self.session.flush()

        return PaymentResult(
            order_id=order.id,
            correlation_id=correlation_id,
            payment_status=normalized,
            order_status=order.status,
            outcome=outcome,
            restocked=restocked,
        )

    def _transition(self, order: Order, target: OrderStatus) -> bool:
        """Move a PENDING order to ``target``; False if another writer settled it first."""
        result = self.session.exec(
            update(Order)
            .where(Order.id == order.id, Order.status == OrderStatus.PENDING)
            .values(status=target, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        self.session.refresh(order)
        return result.rowcount == 1

    def _duplicate_result(self, previous: PaymentNotification) -> PaymentResult:
        order = self.session.get(Order, previous.order_id)
        logger.info(
            "Duplicate payment notification ignored",
            correlation_id=previous.correlation_id,
            order_id=previous.order_id,
        )
        return PaymentResult(
            order_id=previous.order_id,
            correlation_id=previous.correlation_id,
            payment_status=previous.payment_status,
            order_status=order.status,
            outcome=previous.outcome,
            duplicate=True,
        )

    def _find_notification(self, correlation_id: str) -> Optional[PaymentNotification]:
        return self.session.exec(
            select(PaymentNotification).where(PaymentNotification.correlation_id == correlation_id)
        ).first()

    def _restock(self, order: Order) -> int:
        restocked = 0
        for item in order.items:
            self.inventory.restock(item.product_id, item.quantity)
            restocked += item.quantity
        return restocked
