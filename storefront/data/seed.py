# storefront/data/seed.py
from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models import CurrencyModel, ProductModel, VariantModel
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CURRENCIES = [
    {"code": "INR", "name": "Indian Rupee", "symbol": "₹", "exchange_rate": Decimal("1"), "is_base_currency": True},
    {"code": "USD", "name": "US Dollar", "symbol": "$", "exchange_rate": Decimal("0.012")},
    {"code": "EUR", "name": "Euro", "symbol": "€", "exchange_rate": Decimal("0.011")},
]

PRODUCTS = [
    {
        "name": "Classic Cotton Tee",
        "description": "Everyday crew-neck t-shirt in soft combed cotton.",
        "category": "men",
        "variants": [("M", "white", "19.99", 40), ("L", "white", "19.99", 25), ("L", "black", "21.99", 8)],
    },
    {
        "name": "Linen Summer Dress",
        "description": "Lightweight linen dress with a relaxed fit.",
        "category": "women",
        "variants": [("S", "sand", "49.00", 12), ("M", "sand", "49.00", 0)],
    },
]


def seed(db: Session) -> None:
    """Tylko gdy tabele sa puste - nic nie nadpisuje."""
    if not db.query(CurrencyModel).first():
        db.add_all(CurrencyModel(**c) for c in CURRENCIES)
        logger.info(f"Seeded {len(CURRENCIES)} currencies")

    if not db.query(ProductModel).first():
        for p in PRODUCTS:
            db.add(
                ProductModel(
                    name=p["name"],
                    description=p["description"],
                    category=p["category"],
                    images=[],
                    variants=[
                        VariantModel(size=s, color=c, price=Decimal(price), quantity=q)
                        for s, c, price, q in p["variants"]
                    ],
                )
            )
        logger.info(f"Seeded {len(PRODUCTS)} products")

    db.commit()


if __name__ == "__main__":
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        seed(session)
    finally:
        session.close()
