# moderna/modules/inventory/repository.py
import logging
from typing import List, Optional

from sqlalchemy import desc, select, update
from sqlalchemy.orm import Session

from moderna.core.errors import InsufficientStockError, ProductNotFoundError
from moderna.shared.database.models import Product, StockMovement

logger = logging.getLogger(__name__)


class InventoryRepository:
    """
    Stock por producto.

    ``adjust`` escribe dentro de la transacción del llamador. El cambio de
    stock es un UPDATE atómico condicionado a que el resultado no quede
    negativo, así dos ajustes concurrentes nunca se pisan.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> Optional[Product]:
        return self.db.query(Product).filter(
            Product.id == product_id
        ).populate_existing().first()

    def lock_product(self, product_id: int) -> Optional[Product]:
        """SELECT ... FOR UPDATE sobre el producto"""
        return self.db.query(Product).filter(
            Product.id == product_id
        ).populate_existing().with_for_update().first()

    def adjust(
        self,
        product_id: int,
        delta: int,
        movement_type: str,
        reference_id: Optional[int] = None,
        notes: Optional[str] = None
    ) -> int:
        """Sumar ``delta`` al stock y registrar el movimiento. Retorna el stock nuevo."""
        result = self.db.execute(
            update(Product)
            .where(Product.id == product_id, Product.stock + delta >= 0)
            .values(stock=Product.stock + delta)
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            product = self.get_product(product_id)
            if not product:
                raise ProductNotFoundError(f"Producto #{product_id} no encontrado")
            logger.warning(
                f"Stock insuficiente producto {product_id}: "
                f"disponible={product.stock}, solicitado={-delta}"
            )
            raise InsufficientStockError(
                f"Stock insuficiente para '{product.name}'. "
                f"Disponible: {product.stock}, Solicitado: {-delta}"
            )

        quantity_after = self.db.execute(
            select(Product.stock).where(Product.id == product_id)
        ).scalar_one()

        self.db.add(StockMovement(
            product_id=product_id,
            movement_type=movement_type,
            quantity_before=quantity_after - delta,
            quantity_after=quantity_after,
            reference_id=reference_id,
            notes=notes
        ))
        self.db.flush()

        return quantity_after

    def get_movements(self, product_id: int, limit: int = 100) -> List[StockMovement]:
        return self.db.query(StockMovement).filter(
            StockMovement.product_id == product_id
        ).order_by(desc(StockMovement.id)).limit(limit).all()
