from datetime import datetime
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session
from app.core.config import settings
from app.db.session import get_session
from app.models.order import OrderStatus
from app.schemas.common import PageRequest, SortDirection, SortField
from app.schemas.order import OrderPage, OrderResponse
from app.schemas.product import ProductCreate, ProductResponse, ProductUpdate
from app.services.order import OrderService
from app.services.product import ProductService

router = APIRouter()

def get_order_service(session: Session = Depends(get_session)) -> OrderService:
    return OrderService(session)

def get_product_service(session: Session = Depends(get_session)) -> ProductService:
    return ProductService(session)

def get_page_request(
    page: int = Query(1, ge=1),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    sort: SortField = SortField.CREATED_AT,
    direction: SortDirection = SortDirection.ASC,
) -> PageRequest:
    return PageRequest(page=page, size=size, sort=sort, direction=direction)

# Order read endpoints
@router.get("/orders", response_model=OrderPage)
def get_orders(
    page: PageRequest = Depends(get_page_request),
    service: OrderService = Depends(get_order_service)
):
    """Get all orders, paginated"""
    return service.get_all_orders(page)

@router.get("/orders/status", response_model=OrderPage)
def get_orders_by_status(
    status: OrderStatus,
    page: PageRequest = Depends(get_page_request),
    service: OrderService = Depends(get_order_service)
):
    return service.filter_orders_by_status(status, page)

# e.g. /admin/orders/report?start=2025-11-01T00:00:00&end=2025-11-30T23:59:59
@router.get("/orders/report", response_model=OrderPage)
def get_orders_by_date_range(
    start: datetime,
    end: datetime,
    page: PageRequest = Depends(get_page_request),
    service: OrderService = Depends(get_order_service)
):
    return service.find_by_created_at_between(start, end, page)

@router.get("/orders/{order_id}", response_model=OrderResponse)
def get_order(order_id: int, service: OrderService = Depends(get_order_service)):
    return service.get_order_by_id(order_id)

# Product endpoints
@router.post("/products", response_model=ProductResponse, status_code=201)
def create_product(product_in: ProductCreate, service: ProductService = Depends(get_product_service)):
    return service.create_product(product_in)

@router.patch("/products/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    product_in: ProductUpdate,
    service: ProductService = Depends(get_product_service)
):
    """Partially update a product"""
    return service.update_product(product_id, product_in)

@router.delete("/products/{product_id}", status_code=204)
def delete_product(product_id: int, service: ProductService = Depends(get_product_service)):
    """Retire a product (soft delete)"""
    service.delete_product(product_id)
