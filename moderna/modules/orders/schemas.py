from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from enum import Enum

# ==================== ENUMS ====================

class OrderStatus(str, Enum):
    pending = "pending"
    paid = "paid"
    completed = "completed"
    cancelled = "cancelled"

class OrderEvent(str, Enum):
    mark_paid = "mark_paid"
    mark_completed = "mark_completed"
    cancel = "cancel"

# ==================== CLASE BASE ====================

class OrdersBaseModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={
            Decimal: float,
            datetime: lambda v: v.isoformat(),
        }
    )

# ==================== REQUEST SCHEMAS ====================

class OrderItemRequest(BaseModel):
    nombre_producto: str = Field(..., min_length=1, max_length=255)
    precio_unitario: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    cantidad: int = Field(..., gt=0)

class OrderCreateRequest(BaseModel):
    codigo_pedido: str = Field(..., min_length=1, max_length=100, description="Código único del pedido")
    proveedor: str = Field(..., min_length=1, max_length=255)
    estado: Optional[str] = Field(None, description="Solo se admite 'pending'")
    total: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    notas: Optional[str] = None
    productos: List[OrderItemRequest] = Field(..., min_length=1)

class OrderTransitionRequest(BaseModel):
    pedido_id: int
    nota: Optional[str] = Field(None, max_length=500, description="Texto adicional para el historial")

# ==================== RESPONSE SCHEMAS ====================

class OrderItemResponse(OrdersBaseModel):
    id: int
    nombre_producto: str = Field(..., validation_alias="product_name")
    precio_unitario: Decimal = Field(..., validation_alias="unit_price")
    cantidad: int = Field(..., validation_alias="quantity")

class OrderResponse(OrdersBaseModel):
    id: int
    codigo_pedido: str = Field(..., validation_alias="order_code")
    proveedor: str = Field(..., validation_alias="supplier")
    estado: OrderStatus = Field(..., validation_alias="status")
    total: Decimal = Field(..., validation_alias="total_amount")
    notas: Optional[str] = Field(None, validation_alias="notes")
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    productos: List[OrderItemResponse] = Field(default_factory=list, validation_alias="items")

class OrderCreatedResponse(OrdersBaseModel):
    success: bool = True
    message: str
    pedido: OrderResponse

class OrderTransitionResponse(OrdersBaseModel):
    success: bool = True
    pedido_id: int
    estado: OrderStatus
    message: str

class OrderListResponse(OrdersBaseModel):
    success: bool = True
    pedidos: List[OrderResponse]
    total: int
