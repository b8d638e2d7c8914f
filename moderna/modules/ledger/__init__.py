# moderna/modules/ledger/__init__.py
"""
Módulo de Caja

- Diario de transacciones (ingresos / egresos), solo inserción
- Saldo de caja: registro único actualizado en cada transacción

Arquitectura:
- router.py: Endpoints FastAPI
- service.py: Lógica de negocio y unidad de trabajo
- repository.py: Acceso a datos
- schemas.py: Modelos Pydantic de request/response
"""

from .router import router as ledger_router
from .service import LedgerService
from .repository import LedgerRepository

__all__ = [
    "ledger_router",
    "LedgerService",
    "LedgerRepository"
]
