# app/repos/catalog_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.data.models.product import ProductModel, VariantModel


class CatalogRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_variant(self, variant_id) -> VariantModel | None:
        return self.db.get(VariantModel, variant_id)

    def get_product(self, product_id) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def lock_variant(self, variant_id) -> VariantModel | None:
        return self.db.execute(
            select(VariantModel)
            .where(VariantModel.id == variant_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def get_product_by_slug(self, slug: str) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel).where(ProductModel.slug == slug)
        ).scalar_one_or_none()

    def sku_exists(self, skus: list[str]) -> list[str]:
        return list(
            self.db.execute(select(VariantModel.sku).where(VariantModel.sku.in_(skus))).scalars()
        )

    def has_products(self) -> bool:
        return self.db.execute(select(ProductModel.id).limit(1)).first() is not None

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    def create_variant(self, variant: VariantModel) -> VariantModel:
        self.db.add(variant)
        self.db.flush()
        return variant
