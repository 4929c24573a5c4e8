# backend/app/api/v1/endpoints/products.py

"""
Endpoints REST de lectura del catálogo de productos.

La escritura (alta, edición y baja) vive en los endpoints de administración.
"""

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import logging

from app.api import deps
from app.crud import product_crud
from app.schemas import product_schema

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=List[product_schema.ProductResponse])
async def read_products(
    db: AsyncSession = Depends(deps.get_db),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
    category_id: Optional[int] = None,
    min_price: Optional[float] = Query(default=None, ge=0),
    max_price: Optional[float] = Query(default=None, ge=0),
    q: Optional[str] = None,
    featured: Optional[bool] = None,
) -> List[product_schema.ProductResponse]:
    """Obtiene una lista filtrada y paginada de productos."""
    logger.debug(f"📋 PRODUCTOS: Listando con filtros - skip={skip}, limit={limit}")

    if min_price is not None and max_price is not None and min_price > max_price:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="min_price no puede ser mayor que max_price")

    products = await product_crud.get_products(
        db=db, skip=skip, limit=limit, category_id=category_id,
        min_price=min_price, max_price=max_price, name_like=q, featured=featured
    )

    logger.debug(f"📋 PRODUCTOS: Encontrados {len(products)} resultados")
    return products


@router.get("/id/{product_id}", response_model=product_schema.ProductResponse)
async def read_product_by_id(
    *,
    db: AsyncSession = Depends(deps.get_db),
    product_id: int,
) -> product_schema.ProductResponse:
    """Obtiene un producto por ID. Lo usa el cliente de la tienda para congelar el precio."""
    product = await product_crud.get_product(db, product_id)
    if not product:
        logger.warning(f"⚠️ PRODUCTO: No encontrado id={product_id}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Producto no encontrado")
    return product


@router.get("/{slug}", response_model=product_schema.ProductResponse)
async def read_product(
    *,
    db: AsyncSession = Depends(deps.get_db),
    slug: str,
) -> product_schema.ProductResponse:
    """Obtiene los detalles de un producto por su slug."""
    logger.debug(f"🔍 PRODUCTO: Buscando producto '{slug}'")

    product = await product_crud.get_product_by_slug(db, slug)
    if not product:
        logger.warning(f"⚠️ PRODUCTO: No encontrado '{slug}'")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Producto no encontrado")

    return product
