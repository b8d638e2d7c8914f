# moderna/modules/sales/service.py
import logging
from decimal import Decimal
from typing import List, Sequence

from sqlalchemy.orm import Session

from moderna.core.errors import (
    NotFoundError, ProductNotFoundError, ValidationError
)
from moderna.core.unit_of_work import unit_of_work
from moderna.modules.inventory.repository import InventoryRepository
from moderna.modules.inventory.schemas import MovementType
from moderna.shared.database.models import Sale
from .repository import SalesRepository
from .schemas import SaleItemRequest

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


class SalesService:
    """
    Servicio de ventas: validación de stock, cabecera, items y descuento de
    inventario en una sola transacción.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = SalesRepository(db)
        self.inventory = InventoryRepository(db)

    # ==================== REGISTRO DE VENTAS ====================

    def sell(self, items: Sequence[SaleItemRequest]) -> int:
        """
        Registrar una venta completa.

        Los items se procesan en el orden recibido. Si alguno falla (producto
        inexistente o stock insuficiente) no queda nada aplicado: ni la
        cabecera, ni items, ni descuentos de stock.
        """
        items = list(items or [])
        self._validate_items(items)

        with unit_of_work(self.db):
            sale = self.repository.create_sale()
            total = Decimal("0.00")

            for item in items:
                product = self.inventory.lock_product(item.product_id)
                if not product:
                    raise ProductNotFoundError(f"Producto #{item.product_id} no encontrado")

                # el descuento valida el stock en el mismo UPDATE (InsufficientStock)
                self.inventory.adjust(
                    product_id=product.id,
                    delta=-item.quantity,
                    movement_type=MovementType.sale.value,
                    reference_id=sale.id
                )

                unit_price = item.unit_price if item.unit_price is not None else product.unit_price
                unit_price = Decimal(unit_price).quantize(CENT)
                subtotal = (unit_price * item.quantity).quantize(CENT)

                self.repository.create_sale_item(
                    sale_id=sale.id,
                    product_id=product.id,
                    quantity=item.quantity,
                    unit_price=unit_price,
                    subtotal=subtotal
                )
                total += subtotal

            sale.total_amount = total
            sale_id = sale.id

        logger.info(f"Venta {sale_id} registrada: {len(items)} items, total {total}")
        return sale_id

    def _validate_items(self, items: List[SaleItemRequest]):
        """Validaciones de entrada, antes de cualquier escritura"""
        if not items:
            raise ValidationError("La venta debe tener al menos un item")

        for position, item in enumerate(items, start=1):
            if isinstance(item.quantity, bool) or not isinstance(item.quantity, int) or item.quantity <= 0:
                raise ValidationError(f"Item {position}: la cantidad debe ser un entero mayor a 0")
            if item.unit_price is not None:
                if item.unit_price < 0:
                    raise ValidationError(f"Item {position}: el precio unitario no puede ser negativo")
                if item.unit_price != item.unit_price.quantize(CENT):
                    raise ValidationError(f"Item {position}: el precio admite como máximo dos decimales")
            if item.subtotal is not None:
                if item.unit_price is None:
                    raise ValidationError(f"Item {position}: el subtotal requiere precio unitario")
                expected = (item.unit_price * item.quantity).quantize(CENT)
                if item.subtotal.quantize(CENT) != expected:
                    raise ValidationError(
                        f"Item {position}: subtotal {item.subtotal} no coincide con "
                        f"cantidad x precio ({expected})"
                    )

    # ==================== CONSULTAS ====================

    def get_sale(self, sale_id: int) -> Sale:
        sale = self.repository.get_sale_by_id(sale_id)
        if not sale:
            raise NotFoundError(f"Venta #{sale_id} no encontrada")
        return sale
