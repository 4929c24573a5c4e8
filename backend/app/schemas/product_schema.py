# backend/app/schemas/product_schema.py
"""
Esquemas Pydantic para el modelo Product.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, model_validator

from .category_schema import CategoryResponse # Importamos el schema de respuesta de categoría

# ========================================
# ESQUEMA BASE
# ========================================

class ProductBase(BaseModel):
    """Propiedades comunes compartidas entre esquemas de producto."""
    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: Optional[str] = None
    short_description: Optional[str] = None
    price: Decimal = Field(..., ge=0, decimal_places=2)
    compare_at_price: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    image_url: Optional[str] = None
    sku: str = Field(..., min_length=1, max_length=50)
    stock: int = Field(default=0, ge=0)
    featured: bool = False
    category_id: Optional[int] = None


# ========================================
# ESQUEMAS PARA OPERACIONES
# ========================================

class ProductCreate(ProductBase):
    """Esquema para crear un nuevo producto."""

    @model_validator(mode="after")
    def check_compare_at_price(self):
        """El precio de comparación, si existe, debe ser mayor que el precio de venta."""
        if self.compare_at_price is not None and self.compare_at_price <= self.price:
            raise ValueError("compare_at_price debe ser mayor que price")
        return self


class ProductUpdate(BaseModel):
    """Esquema para actualizar un producto. Todos los campos son opcionales."""
    name: Optional[str] = None
    description: Optional[str] = None
    short_description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    compare_at_price: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    image_url: Optional[str] = None
    stock: Optional[int] = Field(default=None, ge=0)
    featured: Optional[bool] = None
    category_id: Optional[int] = None


# ========================================
# ESQUEMA DE RESPUESTA
# ========================================

class ProductResponse(ProductBase):
    """
    Esquema de respuesta para un producto, incluyendo la categoría anidada.
    """
    id: int
    rating: float = 0.0
    review_count: int = 0
    created_at: Optional[datetime] = None
    category: Optional[CategoryResponse] = None

    model_config = ConfigDict(from_attributes=True)
