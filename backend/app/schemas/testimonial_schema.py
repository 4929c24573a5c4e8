# backend/app/schemas/testimonial_schema.py
"""
Esquemas Pydantic para las opiniones de clientes.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class TestimonialCreate(BaseModel):
    """Opinión enviada por un cliente. Queda pendiente de aprobación."""
    content: str = Field(..., min_length=1, max_length=2000)
    rating: int = Field(..., ge=1, le=5)
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_title: Optional[str] = Field(default=None, max_length=255)
    customer_image: Optional[str] = None


class TestimonialResponse(TestimonialCreate):
    id: int
    approved: bool = False
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
