# moderna/modules/ledger/router.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from moderna.config.database import get_db
from .service import LedgerService
from .schemas import (
    TransactionCreateRequest, TransactionCreatedResponse,
    TransactionListResponse, BalanceResponse
)

router = APIRouter(tags=["Caja - Transacciones y saldo"])

# ==================== TRANSACCIONES ====================

@router.post(
    "/transacciones",
    response_model=TransactionCreatedResponse,
    status_code=status.HTTP_201_CREATED
)
def create_transaction(
    request: TransactionCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Registrar un ingreso o egreso de caja.

    El saldo se actualiza en la misma transacción de base de datos.
    """
    service = LedgerService(db)

    transaction_id = service.record(
        description=request.description,
        amount=request.amount,
        kind=request.kind,
        date_value=request.date
    )

    return {
        "success": True,
        "id": transaction_id,
        "message": "Transacción registrada exitosamente"
    }

@router.get("/transacciones", response_model=TransactionListResponse)
def list_transactions(
    kind: Optional[str] = Query(None, description="Filtrar por ingreso | egreso"),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db)
):
    """Listar transacciones, más recientes primero"""
    service = LedgerService(db)
    transactions = service.list_transactions(kind=kind, limit=limit)

    return {
        "success": True,
        "transactions": transactions,
        "total": len(transactions)
    }

# ==================== SALDO ====================

@router.get("/saldo", response_model=BalanceResponse)
def get_balance(db: Session = Depends(get_db)):
    """Saldo actual: base, ingresos, egresos y saldo final"""
    service = LedgerService(db)
    return service.get_balance()
