# backend/app/crud/product_crud.py

"""
Operaciones CRUD para el modelo Product.

Este módulo implementa las operaciones de Create, Read, Update, Delete para productos,
siendo el corazón del sistema de catálogo. También expone las operaciones de
inventario que usa el checkout (descuento de stock).

Estrategias de optimización implementadas:
- selectinload() para cargar la categoría sin consultas N+1
- Filtros combinables para búsquedas flexibles
- Paginación para manejo de catálogos grandes
"""

from typing import List, Optional
from sqlalchemy import or_, select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.db.models.product_model import Product
from app.schemas import product_schema # Schemas Pydantic para productos

import logging

logger = logging.getLogger(__name__)

# ========================================
# OPERACIONES DE LECTURA (READ)
# ========================================

def _base_query():
    return select(Product).options(selectinload(Product.category))


async def get_product(db: AsyncSession, product_id: int, refresh: bool = False) -> Optional[Product]:
    """
    Obtiene un producto por su ID, con la categoría precargada.
    Con refresh=True se sobrescribe la copia que ya esté en la sesión.
    """
    query = _base_query().filter(Product.id == product_id)
    if refresh:
        query = query.execution_options(populate_existing=True)
    result = await db.execute(query)
    return result.scalars().first()


async def get_product_by_slug(db: AsyncSession, slug: str) -> Optional[Product]:
    """Obtiene un producto por su slug, con la categoría precargada."""
    result = await db.execute(_base_query().filter(Product.slug == slug))
    return result.scalars().first()


async def get_product_by_sku(db: AsyncSession, sku: str) -> Optional[Product]:
    """Obtiene un producto por su SKU."""
    result = await db.execute(_base_query().filter(Product.sku == sku))
    return result.scalars().first()


async def get_products(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 20,
    category_id: Optional[int] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    name_like: Optional[str] = None,
    featured: Optional[bool] = None,
) -> List[Product]:
    """
    Obtiene una lista filtrada y paginada de productos de forma asíncrona.
    """
    query = _base_query()

    if category_id is not None:
        query = query.filter(Product.category_id == category_id)
    if min_price is not None:
        query = query.filter(Product.price >= min_price)
    if max_price is not None:
        query = query.filter(Product.price <= max_price)
    if name_like:
        query = query.filter(
            or_(
                Product.name.ilike(f"%{name_like}%"),
                Product.description.ilike(f"%{name_like}%")
            )
        )
    if featured is not None:
        query = query.filter(Product.featured == featured)

    query = query.order_by(Product.id).offset(skip).limit(limit)
    result = await db.execute(query)
    return result.scalars().all()


async def search_products_by_term(db: AsyncSession, search_term: str, top_k: int = 10) -> List[Product]:
    """
    Realiza una búsqueda simple de productos por un término en nombre, descripción o SKU.
    """
    query = _base_query().filter(
        or_(
            Product.name.ilike(f"%{search_term}%"),
            Product.description.ilike(f"%{search_term}%"),
            Product.sku.ilike(f"%{search_term}%")
        )
    ).order_by(Product.id).limit(top_k)

    result = await db.execute(query)
    products = result.scalars().all()
    logger.info(f"Búsqueda por término '{search_term}' encontró {len(products)} productos.")
    return products


async def count_products(db: AsyncSession) -> int:
    return await db.scalar(select(func.count(Product.id))) or 0


async def count_low_stock(db: AsyncSession, threshold: int = 5) -> int:
    """Cuenta los productos con stock igual o inferior al umbral."""
    return await db.scalar(select(func.count(Product.id)).filter(Product.stock <= threshold)) or 0


# ========================================
# OPERACIONES DE ESCRITURA (CREATE, UPDATE, DELETE)
# ========================================

async def create_product(db: AsyncSession, product_data: product_schema.ProductCreate) -> Product:
    """Crea un nuevo producto en la base de datos de forma asíncrona."""
    db_product = Product(**product_data.model_dump())
    db.add(db_product)
    await db.commit()
    # Releer con la categoría cargada para poder serializarla
    return await get_product(db, db_product.id, refresh=True)


async def update_product(db: AsyncSession, product_id: int, product_update: product_schema.ProductUpdate) -> Optional[Product]:
    """Actualiza un producto existente de forma asíncrona."""
    db_product = await get_product(db, product_id)
    if not db_product:
        return None

    update_data = product_update.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(db_product, key, value)

    await db.commit()
    return await get_product(db, product_id, refresh=True)


async def delete_product(db: AsyncSession, product_id: int) -> Optional[Product]:
    """Elimina un producto de la base de datos de forma asíncrona."""
    db_product = await get_product(db, product_id)
    if db_product:
        await db.delete(db_product)
        await db.commit()
    return db_product


# ========================================
# INVENTARIO
# ========================================

async def deduct_stock(db: AsyncSession, product_id: int, quantity: int) -> None:
    """
    Descuenta stock de un producto.
    PRECONDICIÓN: Ya se ha verificado que hay stock suficiente.
    """
    result = await db.execute(
        select(Product).filter(Product.id == product_id).with_for_update()
    )
    product = result.scalars().first()
    if product is not None:
        product.stock = max(0, product.stock - quantity)

    # El commit se gestionará en la transacción de nivel superior que llama a esta función.
