"""
Endpoints REST de lectura de categorías, con sus productos y artículos.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.api import deps
from app.crud import blog_crud, category_crud, product_crud
from app.schemas import blog_schema, category_schema, product_schema

router = APIRouter()

@router.get("", response_model=List[category_schema.CategoryResponse])
async def read_categories(
    db: AsyncSession = Depends(deps.get_db),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=200),
) -> List[category_schema.CategoryResponse]:
    """Obtiene la lista de categorías con paginación."""
    return await category_crud.get_categories(db, skip=skip, limit=limit)

@router.get("/{slug}", response_model=category_schema.CategoryResponse)
async def read_category(
    *,
    db: AsyncSession = Depends(deps.get_db),
    slug: str,
) -> category_schema.CategoryResponse:
    """Obtiene los detalles de una categoría por su slug."""
    category = await category_crud.get_category_by_slug(db, slug)
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Categoría no encontrada")
    return category

@router.get("/{slug}/products", response_model=List[product_schema.ProductResponse])
async def read_category_products(
    *,
    db: AsyncSession = Depends(deps.get_db),
    slug: str,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
) -> List[product_schema.ProductResponse]:
    """Obtiene los productos de una categoría."""
    category = await category_crud.get_category_by_slug(db, slug)
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Categoría no encontrada")
    return await product_crud.get_products(db, skip=skip, limit=limit, category_id=category.id)

@router.get("/{slug}/articles", response_model=List[blog_schema.BlogPostSummary])
async def read_category_articles(
    *,
    db: AsyncSession = Depends(deps.get_db),
    slug: str,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
) -> List[blog_schema.BlogPostSummary]:
    """Obtiene los artículos publicados del blog asociados a una categoría."""
    category = await category_crud.get_category_by_slug(db, slug)
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Categoría no encontrada")
    return await blog_crud.get_posts_by_category(db, category.id, skip=skip, limit=limit)
