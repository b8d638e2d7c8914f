# moderna/api/v1/router.py
from fastapi import APIRouter

from moderna.config.settings import settings
from moderna.modules.ledger import ledger_router
from moderna.modules.inventory import inventory_router
from moderna.modules.sales import sales_router
from moderna.modules.orders import orders_router


# Crear router principal de la API v1
api_router = APIRouter(prefix="/api/v1")

# ==================== MÓDULOS ====================

api_router.include_router(sales_router)
api_router.include_router(inventory_router)
api_router.include_router(ledger_router)
api_router.include_router(orders_router)

# ==================== ENDPOINTS RAÍZ ====================

@api_router.get("/")
async def api_root():
    """Root endpoint de la API"""
    return {
        "message": f"{settings.app_name} v1",
        "version": settings.version,
        "status": "active",
        "available_endpoints": {
            "sales": "/api/v1/ventas",
            "inventory": "/api/v1/productos/{id}/...",
            "ledger": "/api/v1/transacciones, /api/v1/saldo",
            "orders": "/api/v1/pedidos"
        }
    }

@api_router.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.version
    }
