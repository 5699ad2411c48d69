from fastapi import APIRouter, Depends, Header
from sqlmodel import Session
from app.db.session import get_session
from app.schemas.cart import CartItemCreate, CartResponse
from app.services.cart import CartService

router = APIRouter()

def get_cart_service(session: Session = Depends(get_session)) -> CartService:
    return CartService(session)

def get_session_id(x_session_id: str = Header(..., alias="X-Session-Id", min_length=1)) -> str:
    return x_session_id

@router.get("/", response_model=CartResponse)
def get_cart(session_id: str = Depends(get_session_id), service: CartService = Depends(get_cart_service)):
    """Get the session's cart, empty if nothing was added yet"""
    return service.get_cart(session_id)

@router.post("/items", response_model=CartResponse)
def add_to_cart(
    cart_item: CartItemCreate,
    session_id: str = Depends(get_session_id),
    service: CartService = Depends(get_cart_service)
):
    """Add item to cart"""
    return service.add_item(session_id, cart_item.product_id, cart_item.quantity)

@router.delete("/items/{product_id}", response_model=CartResponse)
def remove_from_cart(
    product_id: int,
    session_id: str = Depends(get_session_id),
    service: CartService = Depends(get_cart_service)
):
    """Remove a product's line from the cart"""
    return service.remove_item(session_id, product_id)

@router.delete("/", status_code=204)
def clear_cart(
    session_id: str = Depends(get_session_id),
    service: CartService = Depends(get_cart_service)
):
    """Clear entire cart"""
    service.clear_cart(session_id)
