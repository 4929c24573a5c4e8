# backend/app/api/v1/endpoints/search.py
"""
Búsqueda global de la tienda: productos y artículos del blog.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import logging

from app.api import deps
from app.crud import blog_crud, product_crud
from app.schemas.blog_schema import SearchResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=SearchResponse)
async def search(
    db: AsyncSession = Depends(deps.get_db),
    q: Optional[str] = None,
    top_k: int = Query(default=10, ge=1, le=50),
) -> SearchResponse:
    """Busca el término en productos y artículos publicados."""
    if not q or not q.strip():
        logger.warning("⚠️ BÚSQUEDA: Consulta vacía recibida")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="La consulta de búsqueda no puede estar vacía.")

    term = q.strip()
    logger.info(f"🎯 BÚSQUEDA: Iniciando búsqueda para '{term}' con top_k={top_k}")

    products = await product_crud.search_products_by_term(db, term, top_k=top_k)
    posts = await blog_crud.search_posts_by_term(db, term, top_k=top_k)

    return SearchResponse(products=products, posts=posts)
