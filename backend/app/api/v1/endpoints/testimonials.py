# backend/app/api/v1/endpoints/testimonials.py
"""
Opiniones de clientes: listado público de las aprobadas y envío de nuevas.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from app.api import deps
from app.crud import testimonial_crud
from app.schemas import testimonial_schema

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=List[testimonial_schema.TestimonialResponse])
async def read_testimonials(
    db: AsyncSession = Depends(deps.get_db),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
) -> List[testimonial_schema.TestimonialResponse]:
    """Opiniones aprobadas, las más recientes primero."""
    return await testimonial_crud.get_testimonials(db, skip=skip, limit=limit)


@router.post("", response_model=testimonial_schema.TestimonialResponse, status_code=status.HTTP_201_CREATED)
async def create_testimonial(
    *,
    db: AsyncSession = Depends(deps.get_db),
    testimonial_in: testimonial_schema.TestimonialCreate,
) -> testimonial_schema.TestimonialResponse:
    """Registra una opinión. No se publica hasta que se apruebe en el back-office."""
    testimonial = await testimonial_crud.create_testimonial(db, testimonial_in)
    logger.info(f"⭐ OPINIONES: Nueva opinión id={testimonial.id} ({testimonial.rating}/5) pendiente de aprobación")
    return testimonial
