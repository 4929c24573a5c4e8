# backend/app/schemas/subscriber_schema.py
"""
Esquemas Pydantic para la suscripción al boletín.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, field_validator


class SubscriberCreate(BaseModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        # Una misma dirección no puede suscribirse dos veces por cambiar mayúsculas
        return v.strip().lower()


class SubscriberResponse(BaseModel):
    id: int
    email: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
