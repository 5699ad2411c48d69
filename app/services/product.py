from typing import List, Optional
from sqlalchemy import func, or_
from sqlmodel import Session, select
from app.core.exceptions import DuplicateProductName, NegativeValue, ProductNotFound
from app.core.utils import utc_now
from app.db.session import unit_of_work
from app.models.product import Product
from app.schemas.product import ProductCreate, ProductUpdate

class ProductService:
    """Catalog collaborator used by the cart and checkout."""

    def __init__(self, session: Session):
        self.session = session

    def find_product_by_id(self, product_id: int) -> Optional[Product]:
        return self.session.get(Product, product_id)

    def save_product(self, product: Product) -> Product:
        product.updated_at = utc_now()
        self.session.add(product)
        self.session.flush()
        return product

    def exists_product_by_name(self, name: str) -> bool:
        return self.session.exec(
            select(Product.id).where(func.lower(Product.name) == name.strip().lower())
        ).first() is not None

    def get_product(self, product_id: int) -> Product:
        product = self.find_product_by_id(product_id)
        if not product:
            raise ProductNotFound(product_id)
        return product

    def create_product(self, product_in: ProductCreate) -> Product:
        with unit_of_work(self.session):
            if self.exists_product_by_name(product_in.name):
                raise DuplicateProductName(product_in.name)
            self._check_non_negative(product_in.price, product_in.stock)

            product = Product(
                name=product_in.name.strip(),
                description=product_in.description,
                price=product_in.price,
                stock=product_in.stock,
            )
            self.save_product(product)
        self.session.refresh(product)
        return product

    def update_product(self, product_id: int, product_in: ProductUpdate) -> Product:
        """Apply only the fields present in the patch."""
        with unit_of_work(self.session):
            product = self.get_product(product_id)

            if (
                product_in.name is not None
                and product.name.lower() != product_in.name.strip().lower()
                and self.exists_product_by_name(product_in.name)
            ):
                raise DuplicateProductName(product_in.name)
            self._check_non_negative(product_in.price, product_in.stock)

            if product_in.name is not None:
                product.name = product_in.name.strip()
            if product_in.description is not None:
                product.description = product_in.description
            if product_in.price is not None:
                product.price = product_in.price
            if product_in.stock is not None:
                product.stock = product_in.stock
            self.save_product(product)
        self.session.refresh(product)
        return product

    def delete_product(self, product_id: int) -> None:
        # Soft delete, cart and order lines keep pointing at the row
        with unit_of_work(self.session):
            product = self.get_product(product_id)
            product.is_active = False
            self.save_product(product)

    def search_products(self, text: Optional[str], only_available: bool = False) -> List[Product]:
        """Match any whitespace-separated word of ``text`` inside the product name."""
        if not text or not text.strip():
            return []

        terms = text.split()
        query = select(Product).where(
            Product.is_active == True,  # noqa: E712
            or_(*[Product.name.ilike(f"%{term}%") for term in terms]),
        )
        if only_available:
            query = query.where(Product.stock > 0)
        return list(self.session.exec(query.order_by(Product.name)).all())

    def list_products(self, only_available: bool = False) -> List[Product]:
        query = select(Product).where(Product.is_active == True)  # noqa: E712
        if only_available:
            query = query.where(Product.stock > 0)
        return list(self.session.exec(query.order_by(Product.id)).all())

    @staticmethod
    def _check_non_negative(price, stock) -> None:
        if price is not None and price < 0:
            raise NegativeValue("Price")
        if stock is not None and stock < 0:
            raise NegativeValue("Stock")
