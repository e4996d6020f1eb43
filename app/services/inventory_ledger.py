# app/services/inventory_ledger.py
from sqlalchemy.orm import Session

from app.data.models.inventory import InventoryModel
from app.domain.errors import InsufficientStock, InvalidInput, NegativeStock, NotFound
from app.repos.inventory_repo import InventoryRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


class InventoryLedger:
    """
    Liczniki on_hand/reserved per wariant.

    Kazda operacja blokuje wiersz (SELECT ... FOR UPDATE) i dopiero wtedy
    czyta i zapisuje. Blokada trwa do konca transakcji wolajacego -
    ledger nigdy nie robi commit ani rollback.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = InventoryRepo(db)

    def _lock(self, variant_id) -> InventoryModel:
        row = self.repo.lock(variant_id)
        if row is None:
            raise NotFound(f"inventory for variant {variant_id} not found")
        return row

    @staticmethod
    def _check_qty(qty: int):
        if qty <= 0:
            raise InvalidInput(f"quantity must be positive, got {qty}")

    def reserve(self, variant_id, qty: int) -> InventoryModel:
        self._check_qty(qty)
        row = self._lock(variant_id)

        available = row.available
        if available < qty:
            logger.info(f"Reserve {qty} of {variant_id} rejected, available {available}")
            raise InsufficientStock(variant_id, qty, available)

        row.reserved += qty
        self.db.flush()
        return row

    def release(self, variant_id, qty: int) -> InventoryModel:
        self._check_qty(qty)
        row = self._lock(variant_id)
        # podwojne zwolnienie nie zejdzie ponizej zera
        row.reserved = max(0, row.reserved - qty)
        self.db.flush()
        return row

    def consume(self, variant_id, qty: int) -> InventoryModel:
        self._check_qty(qty)
        row = self._lock(variant_id)
        row.on_hand -= qty
        row.reserved = max(0, row.reserved - qty)
        self.db.flush()
        return row

    def adjust_on_hand(self, variant_id, delta: int) -> InventoryModel:
        row = self._lock(variant_id)

        new_on_hand = row.on_hand + delta
        if new_on_hand < 0:
            raise NegativeStock(
                f"on_hand would go negative for variant {variant_id}: {row.on_hand} + ({delta})"
            )
        if new_on_hand < row.reserved:
            raise NegativeStock(
                f"on_hand would drop below reserved for variant {variant_id}: "
                f"{new_on_hand} < {row.reserved}"
            )

        row.on_hand = new_on_hand
        self.db.flush()
        return row
