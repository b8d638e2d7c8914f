# moderna/modules/sales/__init__.py
"""
Módulo de Ventas

- Registro de ventas con validación y descuento de stock atómicos
- Consulta de una venta con sus items

Arquitectura:
- router.py: Endpoints FastAPI
- service.py: Lógica de negocio
- repository.py: Acceso a datos
- schemas.py: Modelos Pydantic de request/response
"""

from .router import router as sales_router
from .service import SalesService
from .repository import SalesRepository

__all__ = [
    "sales_router",
    "SalesService",
    "SalesRepository"
]
