"""Inventory ledger: the single writer of product stock during checkout.

Reads for checkout take a row lock where the database supports one, and
every decrement is a guarded ``UPDATE ... WHERE stock >= quantity`` so that a
concurrent checkout that slipped in between the check and the write can
never drive stock below zero.
"""

from typing import Optional

import structlog
from sqlalchemy import update
from sqlmodel import Session, select

from app.core.exceptions import ProductNotFound, StockConflict
from app.core.utils import utc_now
from app.models.product import Product

logger = structlog.get_logger(__name__)


class InventoryService:
    def __init__(self, session: Session):
        self.session = session

    def lock_product(self, product_id: int) -> Product:
        """Load a product for a stock decision, locking its row until commit."""
        product: Optional[Product] = self.session.exec(
            select(Product)
            .where(Product.id == product_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).first()
        if product is None:
            raise ProductNotFound(product_id)
        return product

    def decrement(self, product: Product, quantity: int) -> None:
        result = self.session.exec(
            update(Product)
            .where(Product.id == product.id, Product.stock >= quantity)
            .values(stock=Product.stock - quantity, updated_at=utc_now())
            .execution_options(synchronize_session="evaluate")
        )
        if result.rowcount != 1:
            self.session.refresh(product)
            logger.warning(
                "Concurrent stock decrement detected",
                product_id=product.id,
                available=product.stock,
                requested=quantity,
            )
            raise StockConflict(product.id, product.name, product.stock, quantity)

    def restock(self, product_id: int, quantity: int) -> None:
        result = self.session.exec(
            update(Product)
            .where(Product.id == product_id)
            .values(stock=Product.stock + quantity, updated_at=utc_now())
            .execution_options(synchronize_session="evaluate")
        )
        if result.rowcount != 1:
            raise ProductNotFound(product_id)
