# backend/app/api/v1/endpoints/blog.py
"""
Endpoints del blog: artículos publicados y comentarios.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from app.api import deps
from app.crud import blog_crud
from app.schemas import blog_schema

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/posts", response_model=List[blog_schema.BlogPostSummary])
async def read_posts(
    db: AsyncSession = Depends(deps.get_db),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
) -> List[blog_schema.BlogPostSummary]:
    """Lista los artículos publicados, los más recientes primero."""
    return await blog_crud.get_posts(db, skip=skip, limit=limit)


@router.get("/posts/{slug}", response_model=blog_schema.BlogPostResponse)
async def read_post(
    *,
    db: AsyncSession = Depends(deps.get_db),
    slug: str,
) -> blog_schema.BlogPostResponse:
    """Obtiene un artículo publicado por su slug."""
    post = await blog_crud.get_post_by_slug(db, slug)
    if not post:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Artículo no encontrado")
    return post


@router.get("/posts/{slug}/comments", response_model=List[blog_schema.CommentResponse])
async def read_comments(
    *,
    db: AsyncSession = Depends(deps.get_db),
    slug: str,
) -> List[blog_schema.CommentResponse]:
    """Comentarios de un artículo, en orden cronológico."""
    post = await blog_crud.get_post_by_slug(db, slug)
    if not post:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Artículo no encontrado")
    return await blog_crud.get_comments(db, post.id)


@router.post("/posts/{slug}/comments", response_model=blog_schema.CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    *,
    db: AsyncSession = Depends(deps.get_db),
    slug: str,
    comment_in: blog_schema.CommentCreate,
) -> blog_schema.CommentResponse:
    """Publica un comentario en un artículo."""
    post = await blog_crud.get_post_by_slug(db, slug)
    if not post:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Artículo no encontrado")

    comment = await blog_crud.create_comment(db, post, comment_in)
    logger.info(f"💬 BLOG: Nuevo comentario en '{slug}' de {comment.author}")
    return comment
