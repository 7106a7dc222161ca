# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models import AddressModel, CustomerModel, ProductModel, StoreSettingsModel
from storefront.utils.settings import DEFAULT_DELIVERY_FEE
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

PRODUCTS = [
    {"name": "Keyboard", "price": Decimal("199.99"), "stock": 25},
    {"name": "Mouse", "price": Decimal("49.50"), "stock": 100},
    {"name": "Monitor", "price": Decimal("899.00"), "stock": 5},
]

DEMO_CUSTOMER_ID = "00000000-0000-0000-0000-000000000001"


def seed(db):
    # not forcing: only seed if empty
    if db.query(ProductModel).first():
        return False

    for p in PRODUCTS:
        db.add(ProductModel(**p))

    db.add(CustomerModel(id=DEMO_CUSTOMER_ID, first_name="Jan", last_name="Kowalski", email="jan@example.com"))
    db.flush()
    db.add(
        AddressModel(
            customer_id=DEMO_CUSTOMER_ID,
            address_line_1="ul. Prosta 1",
            city="Warszawa",
            state="mazowieckie",
            postal_code="00-001",
            country="PL",
            phone_number="+48 500 000 000",
        )
    )
    db.add(StoreSettingsModel(delivery_fee=DEFAULT_DELIVERY_FEE))
    db.commit()
    logger.info(f"Seeded {len(PRODUCTS)} products and demo customer {DEMO_CUSTOMER_ID}")
    return True


if __name__ == "__main__":
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        seed(session)
    finally:
        session.close()
