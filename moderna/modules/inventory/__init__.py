"""
Módulo de Inventario

Stock por producto: reabastecimiento, consumo y ajustes manuales, con
historial de movimientos. ``InventoryRepository.adjust`` es la primitiva que
también usa el módulo de ventas dentro de su propia transacción.
"""

from .router import router as inventory_router
from .service import InventoryService
from .repository import InventoryRepository

__all__ = [
    "inventory_router",
    "InventoryService",
    "InventoryRepository"
]
