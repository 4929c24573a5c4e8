# backend/app/crud/category_crud.py

"""
Operaciones CRUD para el modelo Category.

Este módulo implementa las operaciones de Create, Read, Update, Delete para categorías,
proporcionando una capa de abstracción entre los endpoints de la API y la base de datos.

Funcionalidades principales:
- Consultas por ID y por slug
- Validación de duplicados por slug
- Operaciones de paginación
"""

from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.category_model import Category
from app.schemas import category_schema # Importamos los schemas Pydantic para categorías

# ========================================
# OPERACIONES DE LECTURA (READ)
# ========================================

async def get_category(db: AsyncSession, category_id: int) -> Optional[Category]:
    """
    Obtiene una categoría por su ID.

    Args:
        db: Sesión de SQLAlchemy
        category_id: ID único de la categoría

    Returns:
        Objeto Category si existe, None si no se encuentra
    """
    result = await db.execute(select(Category).filter(Category.id == category_id))
    return result.scalars().first()


async def get_category_by_slug(db: AsyncSession, slug: str) -> Optional[Category]:
    """
    Obtiene una categoría por su slug.

    El slug es el identificador público que usan las URLs de la tienda
    (/products/category/herbs), por eso es único.
    """
    result = await db.execute(select(Category).filter(Category.slug == slug))
    return result.scalars().first()


async def get_categories(db: AsyncSession, skip: int = 0, limit: int = 100) -> List[Category]:
    """
    Obtiene una lista paginada de todas las categorías, ordenadas por nombre.
    """
    result = await db.execute(select(Category).order_by(Category.name).offset(skip).limit(limit))
    return result.scalars().all()


# ========================================
# OPERACIONES DE ESCRITURA (CREATE, UPDATE)
# ========================================

async def create_category(db: AsyncSession, category: category_schema.CategoryCreate) -> Category:
    """Crea una nueva categoría. El llamador valida antes que el slug no exista."""
    db_category = Category(**category.model_dump())
    db.add(db_category)
    await db.commit()
    await db.refresh(db_category)
    return db_category


async def update_category(db: AsyncSession, category_id: int, category_update: category_schema.CategoryUpdate) -> Optional[Category]:
    """Actualiza parcialmente una categoría existente."""
    db_category = await get_category(db, category_id)
    if not db_category:
        return None

    for key, value in category_update.model_dump(exclude_unset=True).items():
        setattr(db_category, key, value)

    await db.commit()
    await db.refresh(db_category)
    return db_category
