from fastapi import APIRouter, Depends
from sqlmodel import Session
from app.db.session import get_session
from app.schemas.order import OrderRequest, OrderResponse
from app.services.order import OrderService

router = APIRouter()

def get_order_service(session: Session = Depends(get_session)) -> OrderService:
    return OrderService(session)

@router.post("/", response_model=OrderResponse, status_code=201)
def create_order(order_in: OrderRequest, service: OrderService = Depends(get_order_service)):
    """Check out the cart of ``order_in.session_id``"""
    return service.create_order(order_in)

@router.get("/{id}", response_model=OrderResponse)
def get_order(id: int, service: OrderService = Depends(get_order_service)):
    return service.get_order_by_id(id)
