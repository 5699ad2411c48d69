
# Import all models to register them with SQLModel
from app.models.product import Product
from app.models.cart import Cart, CartItem
from app.models.order import Order, OrderItem, OrderStatus
from app.models.payment import PaymentNotification, NotificationOutcome

__all__ = [
    "Product",
    "Cart",
    "CartItem",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentNotification",
    "NotificationOutcome",
]
