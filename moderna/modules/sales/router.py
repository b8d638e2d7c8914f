# moderna/modules/sales/router.py
from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session
from typing import List

from moderna.config.database import get_db
from .service import SalesService
from .schemas import SaleItemRequest, SaleCreatedResponse, SaleResponse

router = APIRouter(prefix="/ventas", tags=["Ventas"])

# ==================== REGISTRO DE VENTAS ====================

@router.post("", response_model=SaleCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_sale(
    items: List[SaleItemRequest] = Body(..., description="Items de la venta"),
    db: Session = Depends(get_db)
):
    """
    Registrar una venta.

    Incluye:
    - Fecha de venta automática
    - Validación de stock por item, en el orden recibido
    - Descuento de inventario en la misma transacción
    - Subtotal calculado en el servidor (el enviado debe coincidir)
    """
    service = SalesService(db)
    sale_id = service.sell(items)

    return {
        "success": True,
        "sale_id": sale_id,
        "message": "Venta registrada exitosamente"
    }

@router.get("/{sale_id}", response_model=SaleResponse)
def get_sale(sale_id: int, db: Session = Depends(get_db)):
    """Detalle de una venta con sus items"""
    service = SalesService(db)
    return service.get_sale(sale_id)
