"""Pytest fixtures for storefront tests."""

import os

# przed importem storefront: baza w pamieci, celery bez brokera
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "1")
os.environ.setdefault("CELERY_BROKER_URL", "memory://")
os.environ.setdefault("CELERY_RESULT_BACKEND", "cache+memory://")
os.environ.setdefault("DEFAULT_LOCALE", "pl")
os.environ.setdefault("DEFAULT_DELIVERY_FEE", "0.00")

from decimal import Decimal

import pytest
import requests
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import storefront.data.models  # noqa: F401
from storefront.data.database import Base
from storefront.data.models import AddressModel, CustomerModel, ProductModel, StoreSettingsModel
from storefront.domain.schemas import OrderItemIn, RequestContext


class FakeNotifier:
    def __init__(self, fail=False):
        self.calls = []
        self.fail = fail

    def send_order_notification(self, customer_id, order_id, status):
        if self.fail:
            raise ConnectionError("broker down")
        self.calls.append((customer_id, order_id, status))


class FakeRenderClient:
    def __init__(self, content=b"%PDF-1.4 fake invoice", error=None):
        self.content = content
        self.error = error
        self.payloads = []

    def render_invoice(self, payload):
        self.payloads.append(payload)
        if self.error:
            raise self.error
        return self.content


class FakeStorageClient:
    def __init__(self, fail=False):
        self.fail = fail
        self.uploads = []

    def upload(self, content, filename, content_type="application/pdf"):
        if self.fail:
            raise requests.ConnectionError("storage unreachable")
        self.uploads.append((filename, content))
        return f"https://files.example.com/{filename}"


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def db(engine):
    Session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def catalog(db):
    """Two customers with addresses, two products (A: 20.00 x10, B: 15.00 x5), store delivery fee 5.00."""
    db.add_all(
        [
            CustomerModel(id="cust-1", first_name="Anna", last_name="Nowak", email="anna@example.com"),
            CustomerModel(id="cust-2", first_name="Piotr", last_name="Zielinski", email="piotr@example.com"),
        ]
    )
    db.flush()
    db.add_all(
        [
            AddressModel(
                id="addr-1",
                customer_id="cust-1",
                address_line_1="ul. Lipowa 5",
                city="Krakow",
                state="malopolskie",
                postal_code="30-001",
                country="PL",
                phone_number="+48 600 100 200",
            ),
            AddressModel(
                id="addr-2",
                customer_id="cust-2",
                address_line_1="ul. Dluga 7",
                city="Gdansk",
                postal_code="80-001",
                country="PL",
                phone_number="+48 600 300 400",
            ),
            ProductModel(id="prod-a", name="Product A", price=Decimal("20.00"), stock=10),
            ProductModel(id="prod-b", name="Product B", price=Decimal("15.00"), stock=5),
            StoreSettingsModel(delivery_fee=Decimal("5.00")),
        ]
    )
    db.commit()
    return {"customer": "cust-1", "other_customer": "cust-2", "address": "addr-1"}


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def customer_ctx():
    return RequestContext(user_id="cust-1", email="anna@example.com", role="customer")


@pytest.fixture
def admin_ctx():
    return RequestContext(user_id="admin-1", email="admin@example.com", role="admin")


@pytest.fixture
def scenario_items():
    return [
        OrderItemIn(product_id="prod-a", quantity=2),
        OrderItemIn(product_id="prod-b", quantity=1),
    ]


@pytest.fixture
def place_order(db, catalog, notifier, scenario_items):
    """Create the reference order (A x2, B x1, fee 5.00) and return its id."""
    from storefront.services.order_service import OrderService

    def _place(payment_method="cash_on_delivery", items=None):
        svc = OrderService(db, notification_service=notifier)
        return svc.create_order(
            customer_id=catalog["customer"],
            shipping_address_id=catalog["address"],
            items=items or scenario_items,
            delivery_fee=Decimal("5.00"),
            payment_method=payment_method,
        )

    return _place
