from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from datetime import date as DateType, datetime
from decimal import Decimal
from enum import Enum

# ==================== ENUMS ====================

class TransactionKind(str, Enum):
    ingreso = "ingreso"
    egreso = "egreso"

# ==================== CLASE BASE ====================

class LedgerBaseModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={
            Decimal: float,
            datetime: lambda v: v.isoformat(),
        }
    )

# ==================== REQUEST SCHEMAS ====================

class TransactionCreateRequest(BaseModel):
    # kind llega como texto para que el servicio responda InvalidKind
    description: str = Field(..., min_length=1, max_length=255, description="Descripción del movimiento")
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, description="Monto positivo")
    kind: str = Field(..., description="ingreso | egreso")
    date: DateType = Field(..., description="Fecha del movimiento")

# ==================== RESPONSE SCHEMAS ====================

class TransactionCreatedResponse(LedgerBaseModel):
    success: bool = True
    id: int
    message: str

class TransactionResponse(LedgerBaseModel):
    id: int
    description: str
    amount: Decimal
    kind: TransactionKind
    date: DateType
    created_at: Optional[datetime]

class TransactionListResponse(LedgerBaseModel):
    success: bool = True
    transactions: List[TransactionResponse]
    total: int

class BalanceResponse(LedgerBaseModel):
    success: bool = True
    base: Decimal
    income: Decimal
    expense: Decimal
    final: Decimal
    updated_at: Optional[datetime]
