from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, Header
from sqlmodel import Session
from app.db.session import get_session
from app.schemas.payment import PaymentResult
from app.services.payment import PaymentService

router = APIRouter()

def get_payment_service(session: Session = Depends(get_session)) -> PaymentService:
    return PaymentService(session)

@router.post("/webhook", response_model=PaymentResult)
def payment_webhook(
    payload: Dict[str, Any] = Body(...),
    x_correlation_id: Optional[str] = Header(None, alias="X-Correlation-Id"),
    service: PaymentService = Depends(get_payment_service)
):
    """Apply a gateway payment result, at most once per correlation id"""
    correlation_id = x_correlation_id or payload.get("correlation_id")
    return service.process_payment_notification(payload, correlation_id)
