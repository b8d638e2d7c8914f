# moderna/modules/orders/service.py
import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, FrozenSet, List, Optional, Sequence

from sqlalchemy.orm import Session

from moderna.core.errors import (
    DuplicateError, InvalidTransitionError, NotFoundError, ValidationError
)
from moderna.core.unit_of_work import unit_of_work
from moderna.shared.database.models import PurchaseOrder
from .repository import OrdersRepository
from .schemas import OrderEvent, OrderItemRequest, OrderStatus

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

TERMINAL_STATUSES: FrozenSet[OrderStatus] = frozenset({OrderStatus.completed, OrderStatus.cancelled})

# evento -> (estados de origen permitidos, estado destino, texto del historial)
TRANSITIONS: Dict[OrderEvent, tuple] = {
    OrderEvent.mark_paid: (
        frozenset({OrderStatus.pending}),
        OrderStatus.paid,
        "Pedido marcado como pagado",
    ),
    OrderEvent.mark_completed: (
        frozenset({OrderStatus.pending, OrderStatus.paid}),
        OrderStatus.completed,
        "Pedido completado",
    ),
    OrderEvent.cancel: (
        frozenset({OrderStatus.pending, OrderStatus.paid}),
        OrderStatus.cancelled,
        "Pedido cancelado",
    ),
}


class OrdersService:
    """
    Ciclo de vida de pedidos: pending -> paid -> completed, o cancelled.

    completed y cancelled son terminales. Cada transición agrega una nota
    con fecha al historial y actualiza ``updated_at``.
    """

    def __init__(self, db: Session, clock: Callable[[], datetime] = datetime.now):
        self.db = db
        self.repository = OrdersRepository(db)
        self.clock = clock

    # ==================== CREACIÓN ====================

    def create(
        self,
        code: str,
        supplier: str,
        status: Optional[str],
        total: Optional[Decimal],
        notes: Optional[str],
        items: Sequence[OrderItemRequest]
    ) -> PurchaseOrder:
        """Crear el pedido y sus productos en una sola transacción"""
        code = (code or "").strip()
        supplier = (supplier or "").strip()
        items = list(items or [])

        if not code:
            raise ValidationError("El código de pedido es obligatorio")
        if not supplier:
            raise ValidationError("El proveedor es obligatorio")
        if status not in (None, OrderStatus.pending.value):
            raise ValidationError(f"Un pedido nuevo debe crearse en estado 'pending', no '{status}'")
        if not items:
            raise ValidationError("El pedido debe tener al menos un producto")

        computed_total = Decimal("0.00")
        for position, item in enumerate(items, start=1):
            if item.cantidad <= 0:
                raise ValidationError(f"Producto {position}: la cantidad debe ser mayor a 0")
            if item.precio_unitario < 0:
                raise ValidationError(f"Producto {position}: el precio no puede ser negativo")
            computed_total += item.precio_unitario * item.cantidad
        computed_total = computed_total.quantize(CENT)

        if total is not None and Decimal(str(total)).quantize(CENT) != computed_total:
            raise ValidationError(
                f"El total {total} no coincide con la suma de los productos ({computed_total})"
            )

        with unit_of_work(self.db):
            if self.repository.code_exists(code):
                raise DuplicateError(f"Ya existe un pedido con código '{code}'")

            order = self.repository.create_order(
                order_code=code,
                supplier=supplier,
                status=OrderStatus.pending.value,
                total_amount=computed_total,
                notes=notes
            )
            for item in items:
                self.repository.add_item(
                    order_id=order.id,
                    product_name=item.nombre_producto.strip(),
                    unit_price=item.precio_unitario.quantize(CENT),
                    quantity=item.cantidad
                )
            order_id = order.id

        logger.info(f"Pedido {order_id} ({code}) creado: {len(items)} productos, total {computed_total}")
        return self.get_order(order_id)

    # ==================== TRANSICIONES ====================

    def mark_paid(self, order_id: int, note: Optional[str] = None) -> PurchaseOrder:
        return self._transition(order_id, OrderEvent.mark_paid, note)

    def mark_completed(self, order_id: int, note: Optional[str] = None) -> PurchaseOrder:
        return self._transition(order_id, OrderEvent.mark_completed, note)

    def cancel(self, order_id: int, note: Optional[str] = None) -> PurchaseOrder:
        return self._transition(order_id, OrderEvent.cancel, note)

    def _transition(self, order_id: int, event: OrderEvent, note: Optional[str]) -> PurchaseOrder:
        allowed_from, target, text = TRANSITIONS[event]

        now = self.clock()
        entry = f"[{now:%Y-%m-%d %H:%M:%S}] {text}"
        if note and note.strip():
            entry = f"{entry}: {note.strip()}"

        with unit_of_work(self.db):
            applied = self.repository.apply_transition(
                order_id,
                allowed_from={status.value for status in allowed_from},
                target=target.value,
                entry=entry,
                updated_at=now
            )
            if not applied:
                order = self.repository.get_order(order_id)
                if not order:
                    raise NotFoundError(f"Pedido #{order_id} no encontrado")

                current = OrderStatus(order.status)
                logger.warning(f"Transición {event.value} rechazada para pedido {order_id} en estado {current.value}")
                if current in TERMINAL_STATUSES:
                    detail = f"el pedido ya está en estado final '{current.value}'"
                else:
                    detail = f"el pedido está en estado '{current.value}'"
                raise InvalidTransitionError(f"No se puede aplicar '{event.value}': {detail}")

        logger.info(f"Pedido {order_id} -> {target.value}")
        return self.get_order(order_id)

    # ==================== CONSULTAS ====================

    def get_order(self, order_id: int) -> PurchaseOrder:
        order = self.repository.get_order(order_id)
        if not order:
            raise NotFoundError(f"Pedido #{order_id} no encontrado")
        return order

    def list_orders(self, status: Optional[str] = None, limit: int = 100) -> List[PurchaseOrder]:
        if status is not None and status not in {s.value for s in OrderStatus}:
            raise ValidationError(f"Estado de pedido inválido: '{status}'")
        return self.repository.list_orders(status=status, limit=limit)
