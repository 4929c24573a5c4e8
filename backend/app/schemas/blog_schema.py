# backend/app/schemas/blog_schema.py
"""
Esquemas Pydantic para artículos del blog y comentarios.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .product_schema import ProductResponse


class BlogPostBase(BaseModel):
    """Propiedades comunes de un artículo."""
    title: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    content: str = Field(..., min_length=1)
    excerpt: Optional[str] = None
    image_url: Optional[str] = None
    author: str = Field(..., min_length=1, max_length=255)
    published: bool = False
    category_id: Optional[int] = None


class BlogPostCreate(BlogPostBase):
    pass


class BlogPostUpdate(BaseModel):
    """Actualización parcial de un artículo."""
    title: Optional[str] = None
    content: Optional[str] = None
    excerpt: Optional[str] = None
    image_url: Optional[str] = None
    published: Optional[bool] = None
    category_id: Optional[int] = None


class BlogPostSummary(BaseModel):
    """Versión ligera para listados (sin el contenido completo)."""
    id: int
    title: str
    slug: str
    excerpt: Optional[str] = None
    image_url: Optional[str] = None
    author: str
    category_id: Optional[int] = None
    comment_count: int = 0
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class BlogPostResponse(BlogPostBase):
    id: int
    comment_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CommentCreate(BaseModel):
    author: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1, max_length=5000)


class CommentResponse(CommentCreate):
    id: int
    blog_post_id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SearchResponse(BaseModel):
    """Resultados de la búsqueda global: productos y artículos publicados."""
    products: List[ProductResponse]
    posts: List[BlogPostSummary]
