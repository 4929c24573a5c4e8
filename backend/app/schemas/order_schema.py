# backend/app/schemas/order_schema.py
"""
Se encarga de definir los esquemas Pydantic para los modelos Order y OrderItem.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
import enum

class OrderStatus(str, enum.Enum):
    """Define los posibles estados de una orden."""
    PENDING = "pending"
    PAID = "paid"
    SHIPPED = "shipped"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class OrderItem(BaseModel):
    """Esquema de respuesta para un item de orden."""
    id: int
    product_id: int
    product_name: str
    sku: str
    quantity: int = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0)

    model_config = ConfigDict(from_attributes=True)

class Order(BaseModel):
    """Esquema completo de respuesta para una orden."""
    id: int
    session_id: str
    customer_name: str
    customer_email: str
    shipping_address: str
    billing_address: str
    payment_method: str
    status: OrderStatus
    subtotal: Decimal
    shipping_fee: Decimal
    tax: Decimal
    total: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[OrderItem] = []

    model_config = ConfigDict(from_attributes=True)

class OrderStatusUpdate(BaseModel):
    """Esquema para actualizar únicamente el estado de una orden."""
    status: OrderStatus = Field(..., description="Nuevo estado de la orden")

class StoreStats(BaseModel):
    """Cifras del panel de administración."""
    product_count: int
    low_stock_count: int
    order_count: int
    pending_order_count: int
    revenue: Decimal
