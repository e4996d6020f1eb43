import os

# przed importem app.* - settings czytaja env przy imporcie
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"

import pytest
from sqlalchemy.orm import sessionmaker

from app.data import models  # noqa: F401
from app.data.database import Base, make_engine
from app.data.models.inventory import InventoryModel
from app.domain.schemas import Customer, ProductCreate, VariantCreate
from app.services.cart_service import CartService
from app.services.catalog_service import CatalogService


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'shop.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def in_session(session_factory):
    """Uruchamia fn(session) w swiezej sesji i ja zamyka (sqlite trzyma blokade do konca transakcji)."""

    def _run(fn):
        with session_factory() as session:
            return fn(session)

    return _run


@pytest.fixture
def make_variant(in_session):
    counter = {"n": 0}

    def _make(price=500, on_hand=2, name="Linen Shirt"):
        counter["n"] += 1
        n = counter["n"]
        payload = ProductCreate(
            slug=f"product-{n}",
            name=name,
            status="active",
            variants=[VariantCreate(sku=f"SKU-{n}", title=f"Variant {n}", price=price, on_hand=on_hand)],
        )
        product = in_session(lambda s: CatalogService(s).create_product(payload))
        return product["variants"][0]["id"]

    return _make


@pytest.fixture
def make_cart(in_session):
    def _make(*lines):
        def _build(s):
            svc = CartService(s)
            cart_id = svc.create_cart()
            for variant_id, qty in lines:
                svc.upsert_item(cart_id, variant_id, qty)
            return cart_id

        return in_session(_build)

    return _make


@pytest.fixture
def levels(in_session):
    def _levels(variant_id):
        def _read(s):
            row = s.get(InventoryModel, variant_id)
            return row.on_hand, row.reserved

        return in_session(_read)

    return _levels


@pytest.fixture
def customer():
    return Customer(
        name="Asha Rao",
        phone="+919800000000",
        email="asha@example.com",
        shipping_address={"line1": "12 MG Road", "city": "Bengaluru", "pin": "560001"},
    )
