"""
Módulo de Pedidos - Compras a proveedores

Estados: pending -> paid -> completed, y cancelled desde cualquier estado no
final. Cada transición deja una nota con fecha en el historial del pedido.
"""

from .router import router as orders_router
from .service import OrdersService, TRANSITIONS
from .repository import OrdersRepository
from .schemas import OrderStatus, OrderEvent

__all__ = [
    "orders_router",
    "OrdersService",
    "OrdersRepository",
    "OrderStatus",
    "OrderEvent",
    "TRANSITIONS"
]
