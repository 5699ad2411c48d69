from typing import Optional
from decimal import Decimal
import structlog
from sqlmodel import Session, select
from app.core.exceptions import InsufficientStock, InvalidQuantity, LineNotFound, ProductNotFound
from app.core.utils import utc_now
from app.db.session import unit_of_work
from app.models.cart import Cart, CartItem
from app.schemas.cart import CartItemResponse, CartResponse
from app.services.product import ProductService

logger = structlog.get_logger(__name__)

class CartService:
    def __init__(self, session: Session):
        self.session = session
        self.products = ProductService(session)

    def find_cart(self, session_id: str) -> Optional[Cart]:
        return self.session.exec(select(Cart).where(Cart.session_id == session_id)).first()

    def get_or_create(self, session_id: str) -> Cart:
        """Return the session's cart, or a fresh unsaved one with a zero total"""
        cart = self.find_cart(session_id)
        if cart is None:
            cart = Cart(session_id=session_id, total_amount=Decimal("0.00"))
        return cart

    def get_cart(self, session_id: str) -> CartResponse:
        return self.to_response(self.get_or_create(session_id))

    def add_item(self, session_id: str, product_id: int, quantity: int = 1) -> CartResponse:
        """Add a product or bump the quantity of its existing line.

        The stock check here is advisory, checkout validates again against
        the stock at that moment.
        """
        with unit_of_work(self.session):
            if quantity <= 0:
                raise InvalidQuantity(quantity)

            product = self.products.find_product_by_id(product_id)
            if not product or not product.is_active:
                raise ProductNotFound(product_id)

            if product.stock < quantity:
                raise InsufficientStock(product.id, product.name, product.stock, quantity)

            cart = self.get_or_create(session_id)
            existing_item = cart.find_item(product_id)

            if existing_item:
                new_quantity = existing_item.quantity + quantity
                if product.stock < new_quantity:
                    raise InsufficientStock(product.id, product.name, product.stock, new_quantity)
                existing_item.quantity = new_quantity
            else:
                cart.items.append(CartItem(
                    product_id=product.id,
                    quantity=quantity,
                    unit_price=product.price
                ))

            self._save(cart)

        logger.info("Added item to cart", session_id=session_id, product_id=product_id, quantity=quantity)
        return self.to_response(cart)

    def remove_item(self, session_id: str, product_id: int) -> CartResponse:
        with unit_of_work(self.session):
            cart = self.get_or_create(session_id)
            item = cart.find_item(product_id)
            if item is None:
                raise LineNotFound(product_id)

            cart.items.remove(item)
            self._save(cart)

        logger.info("Removed item from cart", session_id=session_id, product_id=product_id)
        return self.to_response(cart)

    def clear_cart(self, session_id: str) -> None:
        with unit_of_work(self.session):
            cart = self.get_or_create(session_id)
            cart.items.clear()
            self._save(cart)

        logger.info("Cleared cart", session_id=session_id)

    def to_response(self, cart: Cart) -> CartResponse:
        items = []
        for item in cart.items:
            product = self.products.find_product_by_id(item.product_id)
            items.append(CartItemResponse(
                id=item.id,
                product_id=item.product_id,
                product_name=product.name if product else "Unknown Product",
                quantity=item.quantity,
                unit_price=item.unit_price,
                subtotal=item.subtotal
            ))

        return CartResponse(
            id=cart.id,
            session_id=cart.session_id,
            total_amount=cart.total_amount,
            total_items=len(items),
            items=items
        )

    def _save(self, cart: Cart) -> None:
        cart.recalculate_total()
        cart.updated_at = utc_now()
        self.session.add(cart)
        self.session.flush()
