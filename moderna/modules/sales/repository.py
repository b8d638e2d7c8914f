# moderna/modules/sales/repository.py
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session, selectinload

from moderna.shared.database.models import Sale, SaleItem


class SalesRepository:
    """
    Repositorio de ventas. No hace commit: el servicio controla la transacción.
    """

    def __init__(self, db: Session):
        self.db = db

    def create_sale(self) -> Sale:
        """Crear cabecera de venta con la fecha actual"""
        sale = Sale(
            sale_date=datetime.now(),
            total_amount=Decimal("0.00")
        )
        self.db.add(sale)
        self.db.flush()
        return sale

    def create_sale_item(
        self,
        sale_id: int,
        product_id: int,
        quantity: int,
        unit_price: Decimal,
        subtotal: Decimal
    ) -> SaleItem:
        sale_item = SaleItem(
            sale_id=sale_id,
            product_id=product_id,
            quantity=quantity,
            unit_price=unit_price,
            subtotal=subtotal
        )
        self.db.add(sale_item)
        self.db.flush()
        return sale_item

    def get_sale_by_id(self, sale_id: int) -> Optional[Sale]:
        return self.db.query(Sale).options(
            selectinload(Sale.items)
        ).filter(Sale.id == sale_id).first()
