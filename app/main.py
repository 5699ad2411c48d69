from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import structlog
from app.core.config import settings
from app.core.exceptions import STATUS_BY_KIND, StoreError
from app.core.logging import configure_logging
from app.db.session import create_db_and_tables

logger = structlog.get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings)
    create_db_and_tables()
    logger.info("Application started", payment_mode=settings.PAYMENT_MODE)
    yield

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    lifespan=lifespan,
    description="Storefront API: session carts, atomic checkout and order history"
)

@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    status_code = STATUS_BY_KIND.get(exc.kind, 400)
    logger.info(
        "Request failed",
        path=request.url.path,
        status_code=status_code,
        error_kind=exc.kind,
        error=exc.message,
    )
    return JSONResponse(status_code=status_code, content={"detail": exc.message, "kind": exc.kind})

@app.get("/")
def read_root():
    return {"message": f"Welcome to {settings.PROJECT_NAME}. Visit /docs for Swagger UI."}

from app.routers import products, cart, orders, payment, admin

app.include_router(products.router, prefix="/api/v1/products", tags=["products"])
app.include_router(cart.router, prefix="/api/v1/cart", tags=["cart"])
app.include_router(orders.router, prefix="/api/v1/orders", tags=["orders"])
app.include_router(payment.router, prefix="/api/v1/payment", tags=["payment"])
app.include_router(admin.router, prefix="/api/v1/admin", tags=["admin"])

# Add CORS
from fastapi.middleware.cors import CORSMiddleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
