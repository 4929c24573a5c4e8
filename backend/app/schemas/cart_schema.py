# backend/app/schemas/cart_schema.py
"""
Esquemas Pydantic para la gestión del carrito de la compra.
"""

from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, EmailStr, field_validator


class CartItemCreate(BaseModel):
    """Esquema para añadir un item al carrito."""
    product_id: int
    quantity: int = Field(default=1, ge=1)


class CartItemUpdate(BaseModel):
    """Nueva cantidad de una línea. Para quitarla se usa DELETE, nunca 0."""
    quantity: int = Field(..., ge=1)


class ProductSnapshot(BaseModel):
    """Copia del producto tomada al añadirlo al carrito."""
    name: str
    price: Decimal
    compare_at_price: Optional[Decimal] = None
    image_url: Optional[str] = None
    sku: str

    model_config = ConfigDict(from_attributes=True)


class LineItem(BaseModel):
    """Una línea del carrito: producto, cantidad y copia del producto."""
    id: str
    product_id: int
    quantity: int = Field(..., ge=1)
    product_snapshot: ProductSnapshot

    @classmethod
    def from_record(cls, record) -> "LineItem":
        """Construye la línea a partir de la fila ORM de cart_items."""
        return cls(
            id=record.id,
            product_id=record.product_id,
            quantity=record.quantity,
            product_snapshot=ProductSnapshot.model_validate(record),
        )


class PriceSummarySchema(BaseModel):
    subtotal: Decimal
    shipping_fee: Decimal
    tax: Decimal
    total: Decimal
    free_shipping_threshold: Decimal
    amount_to_free_shipping: Decimal


class Cart(BaseModel):
    """Esquema que representa el estado completo del carrito."""
    session_id: str
    items: List[LineItem]
    item_count: int
    summary: PriceSummarySchema


class CheckoutRequest(BaseModel):
    """Datos del cliente para convertir el carrito en pedido."""
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: EmailStr
    shipping_address: str
    billing_address: Optional[str] = None
    payment_method: str = Field(..., min_length=1, max_length=50)

    @field_validator('customer_name')
    @classmethod
    def validate_customer_name(cls, v):
        if not v.strip():
            raise ValueError('El nombre del cliente es requerido')
        return v.strip()

    @field_validator('shipping_address')
    @classmethod
    def validate_shipping_address(cls, v):
        if not v or len(v.strip()) < 5:
            raise ValueError('La dirección de envío debe tener al menos 5 caracteres')
        return v.strip()
