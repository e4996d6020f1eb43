# app/services/catalog_service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.database import atomic
from app.data.models.inventory import InventoryModel
from app.data.models.product import ProductModel, VariantModel
from app.domain.errors import InvalidInput, NotFound
from app.domain.schemas import ProductCreate, VariantCreate, VariantUpdate
from app.repos.catalog_repo import CatalogRepo
from app.repos.inventory_repo import InventoryRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


def _variant_dict(variant: VariantModel, on_hand: int, reserved: int):
    return {
        "id": variant.id,
        "sku": variant.sku,
        "title": variant.title,
        "size": variant.size,
        "color": variant.color,
        "price": variant.price,
        "compare_at_price": variant.compare_at_price,
        "on_hand": on_hand,
        "reserved": reserved,
    }


class CatalogService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = CatalogRepo(db)
        self.inventory = InventoryRepo(db)

    def create_product(self, payload: ProductCreate):
        """Produkt + warianty + wiersze magazynu (reserved=0) w jednej transakcji."""
        if not payload.variants:
            raise InvalidInput("at least one variant is required")

        skus = [v.sku for v in payload.variants]
        if len(set(skus)) != len(skus):
            raise InvalidInput("duplicate sku in request")

        try:
            with atomic(self.db):
                if self.repo.get_product_by_slug(payload.slug) is not None:
                    raise InvalidInput(f"slug {payload.slug} already exists")
                self._check_skus_free(skus)

                product = self.repo.create_product(
                    ProductModel(
                        slug=payload.slug,
                        name=payload.name,
                        description=payload.description,
                        status=payload.status,
                    )
                )
                variants = [self._create_variant(product.id, v) for v in payload.variants]

                result = {
                    "id": product.id,
                    "slug": product.slug,
                    "name": product.name,
                    "description": product.description,
                    "status": product.status,
                    "variants": variants,
                }
        except IntegrityError as e:
            # wyscig na unikalnym slug/sku miedzy sprawdzeniem a insertem
            raise InvalidInput("product or variant already exists") from e

        logger.info(f"Utworzono produkt {result['slug']} z {len(variants)} wariantami")
        return result

    def add_variant(self, product_id, payload: VariantCreate):
        """Nowy wariant istniejacego produktu razem z wierszem magazynu."""
        try:
            with atomic(self.db):
                if self.repo.get_product(product_id) is None:
                    raise NotFound(f"product {product_id} not found")
                self._check_skus_free([payload.sku])
                result = self._create_variant(product_id, payload)
        except IntegrityError as e:
            raise InvalidInput(f"sku {payload.sku} already exists") from e

        logger.info(f"Produkt {product_id}: dodano wariant {result['sku']}")
        return result

    def update_variant(self, variant_id, payload: VariantUpdate):
        """
        Zmiana opisu i ceny wariantu. Otwarte koszyki widza nowa cene
        przy nastepnym checkoucie, zlozone zamowienia maja swoje migawki.
        """
        with atomic(self.db):
            variant = self.repo.lock_variant(variant_id)
            if variant is None:
                raise NotFound(f"variant {variant_id} not found")

            variant.title = payload.title
            variant.size = payload.size
            variant.color = payload.color
            variant.price = payload.price
            variant.compare_at_price = payload.compare_at_price
            self.db.flush()

            stock = self.inventory.get(variant_id)
            result = _variant_dict(
                variant,
                stock.on_hand if stock else 0,
                stock.reserved if stock else 0,
            )

        logger.info(f"Zaktualizowano wariant {variant_id}: cena {payload.price}")
        return result

    def _check_skus_free(self, skus):
        taken = self.repo.sku_exists(skus)
        if taken:
            raise InvalidInput(f"sku already exists: {', '.join(sorted(taken))}")

    def _create_variant(self, product_id, v: VariantCreate):
        variant = self.repo.create_variant(
            VariantModel(
                product_id=product_id,
                sku=v.sku,
                title=v.title,
                size=v.size,
                color=v.color,
                price=v.price,
                compare_at_price=v.compare_at_price,
            )
        )
        self.inventory.create(InventoryModel(variant_id=variant.id, on_hand=v.on_hand, reserved=0))
        return _variant_dict(variant, v.on_hand, 0)
