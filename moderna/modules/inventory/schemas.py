from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from datetime import datetime
from enum import Enum

# ==================== ENUMS ====================

class MovementType(str, Enum):
    sale = "sale"
    restock = "restock"
    consumption = "consumption"
    adjustment = "adjustment"

# ==================== REQUEST SCHEMAS ====================

class StockQuantityRequest(BaseModel):
    cantidad: int = Field(..., gt=0, description="Unidades a sumar o descontar")
    notas: Optional[str] = Field(None, max_length=255)

class StockAdjustmentRequest(BaseModel):
    cantidad: int = Field(..., description="Ajuste con signo: positivo suma, negativo descuenta")
    notas: Optional[str] = Field(None, max_length=255)

# ==================== RESPONSE SCHEMAS ====================

class StockUpdateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    product_id: int
    nuevo_stock: int = Field(..., serialization_alias="nuevoStock")
    message: str

class StockResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    code: Optional[str]
    stock: int

class StockMovementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    movement_type: MovementType
    quantity_before: int
    quantity_after: int
    reference_id: Optional[int]
    notes: Optional[str]
    created_at: Optional[datetime]

class StockMovementListResponse(BaseModel):
    success: bool = True
    product_id: int
    movements: List[StockMovementResponse]
