# moderna/modules/orders/repository.py
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy import case, desc, or_, update
from sqlalchemy.orm import Session, selectinload

from moderna.shared.database.models import PurchaseOrder, PurchaseOrderItem

NOTES_SEPARATOR = "; "


class OrdersRepository:
    """Pedidos a proveedores. Sin commits: los controla el servicio."""

    def __init__(self, db: Session):
        self.db = db

    def get_order(self, order_id: int) -> Optional[PurchaseOrder]:
        return self.db.query(PurchaseOrder).options(
            selectinload(PurchaseOrder.items)
        ).filter(PurchaseOrder.id == order_id).populate_existing().first()

    def apply_transition(
        self,
        order_id: int,
        allowed_from: Iterable[str],
        target: str,
        entry: str,
        updated_at: datetime
    ) -> bool:
        """
        Cambiar de estado solo si el pedido sigue en uno de ``allowed_from``.

        Estado, historial y fecha se escriben en un único UPDATE condicionado;
        la nota se concatena en SQL sobre el valor vigente. Retorna False si
        ninguna fila cumplió la condición.
        """
        notes = case(
            (or_(PurchaseOrder.notes.is_(None), PurchaseOrder.notes == ""), entry),
            else_=PurchaseOrder.notes + NOTES_SEPARATOR + entry
        )
        result = self.db.execute(
            update(PurchaseOrder)
            .where(PurchaseOrder.id == order_id, PurchaseOrder.status.in_(list(allowed_from)))
            .values(status=target, notes=notes, updated_at=updated_at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def code_exists(self, order_code: str) -> bool:
        return self.db.query(PurchaseOrder.id).filter(
            PurchaseOrder.order_code == order_code
        ).first() is not None

    def create_order(
        self,
        order_code: str,
        supplier: str,
        status: str,
        total_amount: Decimal,
        notes: Optional[str]
    ) -> PurchaseOrder:
        order = PurchaseOrder(
            order_code=order_code,
            supplier=supplier,
            status=status,
            total_amount=total_amount,
            notes=notes
        )
        self.db.add(order)
        self.db.flush()
        return order

    def add_item(
        self,
        order_id: int,
        product_name: str,
        unit_price: Decimal,
        quantity: int
    ) -> PurchaseOrderItem:
        item = PurchaseOrderItem(
            order_id=order_id,
            product_name=product_name,
            unit_price=unit_price,
            quantity=quantity
        )
        self.db.add(item)
        self.db.flush()
        return item

    def list_orders(self, status: Optional[str] = None, limit: int = 100) -> List[PurchaseOrder]:
        query = self.db.query(PurchaseOrder).options(selectinload(PurchaseOrder.items))
        if status:
            query = query.filter(PurchaseOrder.status == status)
        return query.order_by(desc(PurchaseOrder.created_at), desc(PurchaseOrder.id)).limit(limit).all()
