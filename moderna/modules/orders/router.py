# moderna/modules/orders/router.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from moderna.config.database import get_db
from .service import OrdersService
from .schemas import (
    OrderCreateRequest, OrderCreatedResponse, OrderTransitionRequest,
    OrderTransitionResponse, OrderResponse, OrderListResponse
)

router = APIRouter(prefix="/pedidos", tags=["Pedidos a proveedores"])

# ==================== CREACIÓN ====================

@router.post("", response_model=OrderCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    request: OrderCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Crear pedido en estado 'pending' con sus productos.

    El total se calcula a partir de los productos; si se envía debe coincidir.
    """
    service = OrdersService(db)

    order = service.create(
        code=request.codigo_pedido,
        supplier=request.proveedor,
        status=request.estado,
        total=request.total,
        notes=request.notas,
        items=request.productos
    )

    return {
        "success": True,
        "message": "Pedido creado exitosamente",
        "pedido": order
    }

# ==================== TRANSICIONES ====================

@router.post("/pagar", response_model=OrderTransitionResponse)
def mark_order_paid(request: OrderTransitionRequest, db: Session = Depends(get_db)):
    """pending -> paid"""
    order = OrdersService(db).mark_paid(request.pedido_id, request.nota)
    return {
        "success": True,
        "pedido_id": order.id,
        "estado": order.status,
        "message": "Pedido marcado como pagado"
    }

@router.post("/completar", response_model=OrderTransitionResponse)
def mark_order_completed(request: OrderTransitionRequest, db: Session = Depends(get_db)):
    """pending | paid -> completed"""
    order = OrdersService(db).mark_completed(request.pedido_id, request.nota)
    return {
        "success": True,
        "pedido_id": order.id,
        "estado": order.status,
        "message": "Pedido completado"
    }

@router.post("/cancelar", response_model=OrderTransitionResponse)
def cancel_order(request: OrderTransitionRequest, db: Session = Depends(get_db)):
    """pending | paid -> cancelled"""
    order = OrdersService(db).cancel(request.pedido_id, request.nota)
    return {
        "success": True,
        "pedido_id": order.id,
        "estado": order.status,
        "message": "Pedido cancelado"
    }

# ==================== CONSULTAS ====================

@router.get("", response_model=OrderListResponse)
def list_orders(
    estado: Optional[str] = Query(None, description="Filtrar por estado"),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db)
):
    orders = OrdersService(db).list_orders(status=estado, limit=limit)
    return {
        "success": True,
        "pedidos": orders,
        "total": len(orders)
    }

@router.get("/{order_id}", response_model=OrderResponse)
def get_order(order_id: int, db: Session = Depends(get_db)):
    return OrdersService(db).get_order(order_id)
