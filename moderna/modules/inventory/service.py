# moderna/modules/inventory/service.py
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from moderna.core.errors import ProductNotFoundError, ValidationError
from moderna.core.unit_of_work import unit_of_work
from moderna.shared.database.models import Product, StockMovement
from .repository import InventoryRepository
from .schemas import MovementType

logger = logging.getLogger(__name__)


def _require_int(value, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} debe ser un número entero")
    return value


class InventoryService:
    """Reabastecimiento, consumo y ajustes manuales de stock"""

    def __init__(self, db: Session):
        self.db = db
        self.repository = InventoryRepository(db)

    def adjust(
        self,
        product_id: int,
        delta: int,
        movement_type: MovementType = MovementType.adjustment,
        notes: Optional[str] = None
    ) -> int:
        """Ajuste con signo en su propia unidad de trabajo"""
        delta = _require_int(delta, "La cantidad")
        if delta == 0:
            raise ValidationError("La cantidad del ajuste no puede ser 0")

        with unit_of_work(self.db):
            new_stock = self.repository.adjust(
                product_id=product_id,
                delta=delta,
                movement_type=MovementType(movement_type).value,
                notes=notes
            )

        logger.info(f"Stock producto {product_id} ajustado en {delta:+d}: nuevo stock {new_stock}")
        return new_stock

    def restock(self, product_id: int, quantity: int, notes: Optional[str] = None) -> int:
        quantity = _require_int(quantity, "La cantidad")
        if quantity <= 0:
            raise ValidationError("La cantidad a reabastecer debe ser mayor a 0")
        return self.adjust(product_id, quantity, MovementType.restock, notes)

    def consume(self, product_id: int, quantity: int, notes: Optional[str] = None) -> int:
        quantity = _require_int(quantity, "La cantidad")
        if quantity <= 0:
            raise ValidationError("La cantidad a descontar debe ser mayor a 0")
        return self.adjust(product_id, -quantity, MovementType.consumption, notes)

    # ==================== CONSULTAS ====================

    def get_stock(self, product_id: int) -> Product:
        product = self.repository.get_product(product_id)
        if not product:
            raise ProductNotFoundError(f"Producto #{product_id} no encontrado")
        return product

    def list_movements(self, product_id: int, limit: int = 100) -> List[StockMovement]:
        self.get_stock(product_id)
        return self.repository.get_movements(product_id, limit=limit)
