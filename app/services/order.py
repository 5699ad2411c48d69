import re
from typing import Optional
from datetime import datetime, timezone
from decimal import Decimal
import structlog
from sqlalchemy import func
from sqlmodel import Session, select
from app.core.config import Settings, settings as default_settings
from app.core.exceptions import (
    CartNotFound,
    EmptyCart,
    InsufficientStock,
    InvalidDateRange,
    InvalidEmail,
    OrderNotFound,
    StoreError,
)
from app.db.session import unit_of_work
from app.models.cart import Cart
from app.models.order import Order, OrderItem, OrderStatus
from app.schemas.common import PageRequest, SortDirection
from app.schemas.order import OrderPage, OrderRequest, OrderResponse
from app.services.cart import CartService
from app.services.inventory import InventoryService

logger = structlog.get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9_+&*-]+(?:\.[a-zA-Z0-9_+&*-]+)*@(?:[a-zA-Z0-9-]+\.)+[a-zA-Z]{2,}$")

def is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and EMAIL_PATTERN.fullmatch(email) is not None

def _as_naive_utc(value: datetime) -> datetime:
    # created_at is stored as naive UTC
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value

class OrderService:
    def __init__(self, session: Session, settings: Settings = default_settings):
        self.session = session
        self.settings = settings
        self.carts = CartService(session)
        self.inventory = InventoryService(session)

    def create_order(self, request: OrderRequest) -> OrderResponse:
        """Convert the session's cart into an order.

        Everything runs in a single unit of work: the stock decrements, the
        new order and the deletion of the cart commit together, and any
        failure leaves cart, stock and orders exactly as they were.

        Without a payment gateway (``PAYMENT_MODE=sync``) the payment is
        assumed to succeed immediately, so stock is taken and the order is
        born ``PAID``. In deferred mode the order stays ``PENDING`` holding
        the stock until a payment notification settles it.
        """
        try:
            with unit_of_work(self.session):
                order = self._checkout(request)
        except StoreError as e:
            logger.warning(
                "Checkout rejected",
                session_id=request.session_id,
                error_kind=e.kind,
                error=e.message,
            )
            raise

        logger.info(
            "Checkout completed",
            session_id=request.session_id,
            order_id=order.id,
            total_amount=str(order.total_amount),
            status=order.status.value,
        )
        return OrderResponse.from_entity(order)

    def _checkout(self, request: OrderRequest) -> Order:
        cart: Optional[Cart] = self.carts.find_cart(request.session_id)
        if cart is None:
            raise CartNotFound(request.session_id)

        if not cart.items:
            raise EmptyCart(request.session_id)

        if not is_valid_email(request.customer_email):
            raise InvalidEmail(request.customer_email)

        # Re-check every line against current stock before touching any of it
        products = {}
        for cart_item in cart.items:
            product = self.inventory.lock_product(cart_item.product_id)
            if product.stock < cart_item.quantity:
                raise InsufficientStock(product.id, product.name, product.stock, cart_item.quantity)
            products[cart_item.product_id] = product

        order = Order(
            customer_name=request.customer_name,
            customer_email=request.customer_email,
            customer_phone=request.customer_phone,
            shipping_address=request.shipping_address,
            shipping_city=request.shipping_city,
            shipping_zip=request.shipping_zip,
            total_amount=Decimal("0.00"),
        )

        final_total = Decimal("0.00")
        for cart_item in cart.items:
            product = products[cart_item.product_id]
            self.inventory.decrement(product, cart_item.quantity)

            # Price comes from the cart line, the price seen when it was added
            order_item = OrderItem(
                product_id=product.id,
                product_name=product.name,
                quantity=cart_item.quantity,
                price=cart_item.unit_price
            )
            order.items.append(order_item)
            final_total += order_item.subtotal

        order.total_amount = final_total
        order.status = OrderStatus.PAID if self.settings.PAYMENT_MODE == "sync" else OrderStatus.PENDING
        order.cart_id = cart.id

        self.session.add(order)
        self.session.delete(cart)
        self.session.flush()
        return order

    def get_order_by_id(self, order_id: int) -> OrderResponse:
        order = self.session.get(Order, order_id)
        if not order:
            raise OrderNotFound(order_id)
        return OrderResponse.from_entity(order)

    def get_all_orders(self, page: PageRequest) -> OrderPage:
        return self._paginate(select(Order), page)

    def filter_orders_by_status(self, status: OrderStatus, page: PageRequest) -> OrderPage:
        return self._paginate(select(Order).where(Order.status == status), page)

    def find_by_created_at_between(self, start: datetime, end: datetime, page: PageRequest) -> OrderPage:
        """Orders created within [start, end], both ends inclusive."""
        start, end = _as_naive_utc(start), _as_naive_utc(end)
        if start > end:
            raise InvalidDateRange(start, end)
        query = select(Order).where(Order.created_at >= start, Order.created_at <= end)
        return self._paginate(query, page)

    def _paginate(self, query, page: PageRequest) -> OrderPage:
        # Get total count
        total_query = query.with_only_columns(func.count(Order.id))
        total = self.session.exec(total_query).first() or 0

        sort_column = getattr(Order, page.sort.value)
        ordering = sort_column.desc() if page.direction == SortDirection.DESC else sort_column.asc()

        # Tie-break on id so pages are stable
        orders = self.session.exec(
            query.order_by(ordering, Order.id.asc()).offset(page.offset).limit(page.size)
        ).all()

        return OrderPage.build(
            items=[OrderResponse.from_entity(order) for order in orders],
            total=total,
            request=page,
        )
