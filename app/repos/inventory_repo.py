# app/repos/inventory_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.data.models.inventory import InventoryModel


class InventoryRepo:
    def __init__(self, db: Session):
        self.db = db

    def get(self, variant_id) -> InventoryModel | None:
        return self.db.get(InventoryModel, variant_id)

    def lock(self, variant_id) -> InventoryModel | None:
        # najpierw blokada, potem odczyt - nigdy odwrotnie
        return self.db.execute(
            select(InventoryModel)
            .where(InventoryModel.variant_id == variant_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def create(self, inventory: InventoryModel) -> InventoryModel:
        self.db.add(inventory)
        self.db.flush()
        return inventory
