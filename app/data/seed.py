# app/data/seed.py
from app.data.database import SessionLocal
from app.domain.schemas import ProductCreate, VariantCreate
from app.repos.catalog_repo import CatalogRepo
from app.services.catalog_service import CatalogService
from app.utils.logging import get_logger

logger = get_logger(__name__)

DEMO_PRODUCTS = [
    ProductCreate(
        slug="linen-shirt",
        name="Linen Shirt",
        description="Relaxed fit linen shirt",
        status="active",
        variants=[
            VariantCreate(sku="LS-WHT-M", title="White / M", size="M", color="White", price=149900, on_hand=10),
            VariantCreate(sku="LS-WHT-L", title="White / L", size="L", color="White", price=149900, on_hand=8),
        ],
    ),
    ProductCreate(
        slug="denim-jacket",
        name="Denim Jacket",
        description="Classic blue denim",
        status="active",
        variants=[
            VariantCreate(sku="DJ-BLU-M", title="Blue / M", size="M", color="Blue", price=349900, on_hand=5),
        ],
    ),
]


def seed():
    db = SessionLocal()
    try:
        # tylko na pustej bazie
        if CatalogRepo(db).has_products():
            return
        db.rollback()
        svc = CatalogService(db)
        for product in DEMO_PRODUCTS:
            svc.create_product(product)
        logger.info(f"Seeded {len(DEMO_PRODUCTS)} demo products")
    finally:
        db.close()
