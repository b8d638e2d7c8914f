from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

# ==================== CLASE BASE PARA RESPUESTAS (Pydantic v2) ====================

class SalesBaseModel(BaseModel):
    """
    Clase base para todos los esquemas de respuesta,
    con configuración de Pydantic v2.
    """
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        json_encoders={
            Decimal: float,
            datetime: lambda v: v.isoformat(),
        }
    )

# ==================== REQUEST SCHEMAS ====================

class SaleItemRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: int = Field(..., alias="productId", description="ID del producto")
    quantity: int = Field(..., gt=0, description="Cantidad")
    unit_price: Optional[Decimal] = Field(
        None, alias="unitPrice", ge=0, max_digits=10, decimal_places=2,
        description="Precio unitario; si se omite se usa el precio del catálogo"
    )
    subtotal: Optional[Decimal] = Field(
        None, ge=0, max_digits=12, decimal_places=2,
        description="Se valida contra cantidad x precio unitario"
    )

# ==================== RESPONSE SCHEMAS ====================

class SaleCreatedResponse(SalesBaseModel):
    success: bool = True
    sale_id: int = Field(..., serialization_alias="saleId")
    message: str

class SaleItemResponse(SalesBaseModel):
    id: int
    product_id: int = Field(..., serialization_alias="productId")
    quantity: int
    unit_price: Decimal = Field(..., serialization_alias="unitPrice")
    subtotal: Decimal

class SaleResponse(SalesBaseModel):
    id: int
    sale_date: datetime
    total_amount: Decimal
    items: List[SaleItemResponse]
