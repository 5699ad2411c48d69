"""Error taxonomy raised by the store services.

Every error carries a ``kind`` so the transport layer can map it to a status
code without knowing the concrete class. Services raise these and let the
unit of work roll back; nothing here is process-fatal.
"""


class StoreError(Exception):
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ResourceNotFound(StoreError):
    kind = "not_found"


class BusinessRuleViolation(StoreError):
    kind = "business_rule"


class ValidationError(StoreError):
    kind = "validation"


class Conflict(StoreError):
    kind = "conflict"


# Not found
class CartNotFound(ResourceNotFound):
    def __init__(self, session_id: str):
        super().__init__("Cart not found or expired")
        self.session_id = session_id


class EmptyCart(ResourceNotFound):
    def __init__(self, session_id: str):
        super().__init__("The cart is empty")
        self.session_id = session_id


class OrderNotFound(ResourceNotFound):
    def __init__(self, order_id: int):
        super().__init__(f"Order with id {order_id} does not exist")
        self.order_id = order_id


class ProductNotFound(ResourceNotFound):
    def __init__(self, product_id: int):
        super().__init__(f"Product with id {product_id} does not exist")
        self.product_id = product_id


class LineNotFound(ResourceNotFound):
    def __init__(self, product_id: int):
        super().__init__(f"Product {product_id} is not in the cart")
        self.product_id = product_id


# Business rules
class InvalidQuantity(BusinessRuleViolation):
    def __init__(self, quantity: int):
        super().__init__("Quantity must be greater than 0")
        self.quantity = quantity


class InsufficientStock(BusinessRuleViolation):
    def __init__(self, product_id: int, product_name: str, available: int, requested: int):
        super().__init__(
            f"Insufficient stock for product {product_name}: "
            f"{available} available, {requested} requested"
        )
        self.product_id = product_id
        self.product_name = product_name
        self.available = available
        self.requested = requested


class NegativeValue(BusinessRuleViolation):
    def __init__(self, field: str):
        super().__init__(f"{field} cannot be negative")
        self.field = field


class DuplicateProductName(BusinessRuleViolation):
    def __init__(self, name: str):
        super().__init__(f"Product with name '{name}' already exists")
        self.name = name


# Validation
class InvalidEmail(ValidationError):
    def __init__(self, email: str):
        super().__init__("Invalid email format")
        self.email = email


class InvalidDateRange(ValidationError):
    def __init__(self, start, end):
        super().__init__(f"Range start {start.isoformat()} is after end {end.isoformat()}")
        self.start = start
        self.end = end


class UnknownPaymentStatus(ValidationError):
    def __init__(self, status: str):
        super().__init__(f"Unknown payment status '{status}'")
        self.status = status


class InvalidPaymentNotification(ValidationError):
    def __init__(self, reason: str):
        super().__init__(f"Invalid payment notification: {reason}")


# Conflict
class StockConflict(Conflict, InsufficientStock):
    """Raised when a concurrent checkout took the stock between check and write."""

    # Conflict is listed first so its kind wins over InsufficientStock's


STATUS_BY_KIND = {
    ResourceNotFound.kind: 404,
    BusinessRuleViolation.kind: 400,
    ValidationError.kind: 422,
    Conflict.kind: 409,
}
