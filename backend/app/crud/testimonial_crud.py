# backend/app/crud/testimonial_crud.py
"""
Operaciones CRUD para las opiniones de clientes.
"""

from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.testimonial_model import Testimonial
from app.schemas import testimonial_schema


async def get_testimonial(db: AsyncSession, testimonial_id: int) -> Optional[Testimonial]:
    result = await db.execute(select(Testimonial).filter(Testimonial.id == testimonial_id))
    return result.scalars().first()


async def get_testimonials(
    db: AsyncSession, skip: int = 0, limit: int = 20, approved_only: bool = True
) -> List[Testimonial]:
    """Lista opiniones, las más recientes primero. Por defecto sólo las aprobadas."""
    query = select(Testimonial)
    if approved_only:
        query = query.filter(Testimonial.approved.is_(True))
    query = query.order_by(Testimonial.created_at.desc(), Testimonial.id.desc()).offset(skip).limit(limit)
    result = await db.execute(query)
    return result.scalars().all()


async def create_testimonial(db: AsyncSession, testimonial: testimonial_schema.TestimonialCreate) -> Testimonial:
    db_testimonial = Testimonial(**testimonial.model_dump(), approved=False)
    db.add(db_testimonial)
    await db.commit()
    await db.refresh(db_testimonial)
    return db_testimonial


async def approve_testimonial(db: AsyncSession, testimonial_id: int) -> Optional[Testimonial]:
    db_testimonial = await get_testimonial(db, testimonial_id)
    if not db_testimonial:
        return None

    db_testimonial.approved = True
    await db.commit()
    await db.refresh(db_testimonial)
    return db_testimonial


async def delete_testimonial(db: AsyncSession, testimonial_id: int) -> Optional[Testimonial]:
    db_testimonial = await get_testimonial(db, testimonial_id)
    if db_testimonial:
        await db.delete(db_testimonial)
        await db.commit()
    return db_testimonial
