from sqlalchemy import (
    CheckConstraint, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from moderna.config.database import Base

LEDGER_ID = 1


class TimestampMixin:
    """Mixin para timestamps automáticos"""
    # hora local sin zona, igual que el reloj de la aplicación (datetime.now)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

# ===== CATÁLOGO =====

class Category(Base):
    """Categoría de productos"""
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False)

    products = relationship("Product", back_populates="category")

class Product(Base, TimestampMixin):
    """
    Producto / medicamento.

    ``stock`` es el nombre canónico de las unidades disponibles (en esquemas
    anteriores: ``UnidadesPorCaja`` o ``Stock``).
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    code = Column(String(100), unique=True)
    category_id = Column(Integer, ForeignKey("categories.id"))
    stock = Column(Integer, default=0, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False, default=0)
    purchase_price = Column(Numeric(10, 2))

    # Campos de medicamento
    manufacturer = Column(String(255))
    expiry_date = Column(Date)
    dosage_form = Column(String(100))

    __table_args__ = (
        CheckConstraint("stock >= 0", name="products_stock_non_negative"),
    )

    # Relationships
    category = relationship("Category", back_populates="products")
    movements = relationship("StockMovement", back_populates="product")

class StockMovement(Base):
    """Historial de cambios de stock (solo inserción)"""
    __tablename__ = "stock_movements"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    movement_type = Column(String(50), nullable=False)
    quantity_before = Column(Integer, nullable=False)
    quantity_after = Column(Integer, nullable=False)
    reference_id = Column(Integer)
    notes = Column(String(255))
    created_at = Column(DateTime, server_default=func.current_timestamp(), nullable=False)

    # Relationships
    product = relationship("Product", back_populates="movements")

# ===== VENTAS =====

class Sale(Base):
    """Cabecera de venta"""
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    sale_date = Column(DateTime, server_default=func.current_timestamp(), nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)

    # Relationships
    items = relationship("SaleItem", back_populates="sale", order_by="SaleItem.id")

class SaleItem(Base):
    """Item de venta"""
    __tablename__ = "sale_items"

    id = Column(Integer, primary_key=True, index=True)
    sale_id = Column(Integer, ForeignKey("sales.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    subtotal = Column(Numeric(12, 2), nullable=False)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="sale_items_quantity_positive"),
    )

    # Relationships
    sale = relationship("Sale", back_populates="items")
    product = relationship("Product")

# ===== CAJA =====

class Transaction(Base):
    """Movimiento de caja (ingreso / egreso). Nunca se modifica."""
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    description = Column(String(255), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    kind = Column(String(20), nullable=False, index=True)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime, server_default=func.current_timestamp(), nullable=False)

    __table_args__ = (
        CheckConstraint("amount > 0", name="transactions_amount_positive"),
        CheckConstraint("kind IN ('ingreso', 'egreso')", name="transactions_kind_valid"),
    )

class Ledger(Base):
    """Saldo de caja: registro único, solo lo modifican las transacciones"""
    __tablename__ = "ledger"

    id = Column(Integer, primary_key=True, default=LEDGER_ID)
    base_balance = Column(Numeric(14, 2), nullable=False, default=0)
    total_income = Column(Numeric(14, 2), nullable=False, default=0)
    total_expense = Column(Numeric(14, 2), nullable=False, default=0)
    balance = Column(Numeric(14, 2), nullable=False, default=0)
    updated_at = Column(DateTime, server_default=func.current_timestamp(), onupdate=func.current_timestamp())

# ===== PEDIDOS =====

class PurchaseOrder(Base, TimestampMixin):
    """Pedido a proveedor"""
    __tablename__ = "purchase_orders"

    id = Column(Integer, primary_key=True, index=True)
    order_code = Column(String(100), unique=True, nullable=False)
    supplier = Column(String(255), nullable=False)
    status = Column(String(50), default="pending", nullable=False, index=True)
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)
    notes = Column(Text)

    # Relationships
    items = relationship("PurchaseOrderItem", back_populates="order", order_by="PurchaseOrderItem.id")

class PurchaseOrderItem(Base):
    """Producto de un pedido; el nombre se guarda desnormalizado"""
    __tablename__ = "purchase_order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("purchase_orders.id"), nullable=False, index=True)
    product_name = Column(String(255), nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False)

    # Relationships
    order = relationship("PurchaseOrder", back_populates="items")
