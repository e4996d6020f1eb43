# app/services/inventory_service.py
from sqlalchemy.orm import Session

from app.data.database import atomic
from app.domain.schemas import InventoryLevels
from app.services.inventory_ledger import InventoryLedger
from app.utils.logging import get_logger

logger = get_logger(__name__)


class InventoryService:
    """Korekty stanu magazynowego z panelu admina (przyjecie towaru, inwentaryzacja)."""

    def __init__(self, db: Session):
        self.db = db
        self.ledger = InventoryLedger(db)

    def adjust(self, variant_id, delta: int) -> InventoryLevels:
        with atomic(self.db):
            row = self.ledger.adjust_on_hand(variant_id, delta)
            levels = InventoryLevels(variant_id=variant_id, on_hand=row.on_hand, reserved=row.reserved)

        logger.info(
            f"Korekta magazynu {variant_id} o {delta}: on_hand={levels.on_hand}, reserved={levels.reserved}"
        )
        return levels
