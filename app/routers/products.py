from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlmodel import Session
from app.core.exceptions import ProductNotFound
from app.db.session import get_session
from app.schemas.product import ProductResponse
from app.services.product import ProductService

router = APIRouter()

def get_product_service(session: Session = Depends(get_session)) -> ProductService:
    return ProductService(session)

@router.get("/", response_model=List[ProductResponse])
def read_products(
    q: Optional[str] = None,
    available: bool = False,
    service: ProductService = Depends(get_product_service)
):
    if q:
        return service.search_products(q, only_available=available)
    return service.list_products(only_available=available)

@router.get("/{product_id}", response_model=ProductResponse)
def read_product(product_id: int, service: ProductService = Depends(get_product_service)):
    product = service.get_product(product_id)
    if not product.is_active:
        raise ProductNotFound(product_id)
    return product
