# moderna/modules/inventory/router.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from moderna.config.database import get_db
from .service import InventoryService
from .schemas import (
    StockQuantityRequest, StockAdjustmentRequest, StockUpdateResponse,
    StockResponse, StockMovementListResponse, MovementType
)

router = APIRouter(prefix="/productos", tags=["Inventario"])

@router.post("/{product_id}/reabastecer", response_model=StockUpdateResponse)
def restock_product(
    product_id: int,
    request: StockQuantityRequest,
    db: Session = Depends(get_db)
):
    """Sumar unidades al stock de un producto"""
    service = InventoryService(db)
    new_stock = service.restock(product_id, request.cantidad, request.notas)

    return {
        "success": True,
        "product_id": product_id,
        "nuevo_stock": new_stock,
        "message": "Stock reabastecido"
    }

@router.post("/{product_id}/consumir", response_model=StockUpdateResponse)
def consume_product(
    product_id: int,
    request: StockQuantityRequest,
    db: Session = Depends(get_db)
):
    """Descontar unidades del stock (consumo interno, merma)"""
    service = InventoryService(db)
    new_stock = service.consume(product_id, request.cantidad, request.notas)

    return {
        "success": True,
        "product_id": product_id,
        "nuevo_stock": new_stock,
        "message": "Stock descontado"
    }

@router.post("/{product_id}/ajustar", response_model=StockUpdateResponse)
def adjust_product_stock(
    product_id: int,
    request: StockAdjustmentRequest,
    db: Session = Depends(get_db)
):
    """Corrección manual de stock con cantidad positiva o negativa"""
    service = InventoryService(db)
    new_stock = service.adjust(
        product_id, request.cantidad, MovementType.adjustment, request.notas
    )

    return {
        "success": True,
        "product_id": product_id,
        "nuevo_stock": new_stock,
        "message": "Stock ajustado"
    }

@router.get("/{product_id}/stock", response_model=StockResponse)
def get_product_stock(product_id: int, db: Session = Depends(get_db)):
    service = InventoryService(db)
    return service.get_stock(product_id)

@router.get("/{product_id}/movimientos", response_model=StockMovementListResponse)
def get_stock_movements(
    product_id: int,
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db)
):
    """Historial de movimientos de stock del producto"""
    service = InventoryService(db)
    movements = service.list_movements(product_id, limit=limit)

    return {
        "success": True,
        "product_id": product_id,
        "movements": movements
    }
