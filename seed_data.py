from decimal import Decimal
import structlog
from sqlmodel import Session, select
from app.core.logging import configure_logging
from app.db.session import engine, create_db_and_tables
from app.models.product import Product

logger = structlog.get_logger(__name__)

SEED_PRODUCTS = [
    dict(name="Espresso Beans 1kg", description="Dark roast whole beans.", price=Decimal("24.90"), stock=120),
    dict(name="Pour Over Kettle", description="Gooseneck kettle, 1 litre.", price=Decimal("39.00"), stock=40),
    dict(name="Ceramic Dripper", description="Single-cup cone dripper.", price=Decimal("18.50"), stock=75),
    dict(name="Paper Filters x100", description="Bleached cone filters.", price=Decimal("5.25"), stock=300),
    dict(name="Hand Grinder", description="Conical burr hand grinder.", price=Decimal("64.00"), stock=15),
]

def seed_products(session: Session) -> int:
    """Insert the demo catalog unless products already exist. Returns the number inserted."""
    existing_products = session.exec(select(Product)).all()
    if existing_products:
        logger.info("Database already contains products, skipping seed", count=len(existing_products))
        return 0

    for data in SEED_PRODUCTS:
        session.add(Product(**data))

    session.commit()
    logger.info("Seeded products", count=len(SEED_PRODUCTS))
    return len(SEED_PRODUCTS)

if __name__ == "__main__":
    configure_logging()
    create_db_and_tables()
    with Session(engine) as session:
        seed_products(session)
