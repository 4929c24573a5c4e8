# backend/app/crud/blog_crud.py
"""
Operaciones CRUD para artículos del blog y sus comentarios.
"""

from typing import List, Optional
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.db.models.blog_model import BlogPost, Comment
from app.schemas import blog_schema

# ========================================
# ARTÍCULOS
# ========================================

async def get_post(db: AsyncSession, post_id: int) -> Optional[BlogPost]:
    result = await db.execute(select(BlogPost).filter(BlogPost.id == post_id))
    return result.scalars().first()


async def get_post_by_slug(db: AsyncSession, slug: str, published_only: bool = True) -> Optional[BlogPost]:
    """Obtiene un artículo por slug. Por defecto los borradores no son visibles."""
    query = select(BlogPost).filter(BlogPost.slug == slug)
    if published_only:
        query = query.filter(BlogPost.published.is_(True))
    result = await db.execute(query)
    return result.scalars().first()


async def get_posts(db: AsyncSession, skip: int = 0, limit: int = 20, published_only: bool = True) -> List[BlogPost]:
    """Lista artículos, los más recientes primero."""
    query = select(BlogPost)
    if published_only:
        query = query.filter(BlogPost.published.is_(True))
    query = query.order_by(BlogPost.created_at.desc(), BlogPost.id.desc()).offset(skip).limit(limit)
    result = await db.execute(query)
    return result.scalars().all()


async def get_posts_by_category(db: AsyncSession, category_id: int, skip: int = 0, limit: int = 20) -> List[BlogPost]:
    """Artículos publicados de una categoría, los más recientes primero."""
    query = (
        select(BlogPost)
        .filter(BlogPost.category_id == category_id, BlogPost.published.is_(True))
        .order_by(BlogPost.created_at.desc(), BlogPost.id.desc())
        .offset(skip)
        .limit(limit)
    )
    result = await db.execute(query)
    return result.scalars().all()


async def search_posts_by_term(db: AsyncSession, search_term: str, top_k: int = 10) -> List[BlogPost]:
    """Busca el término en título, extracto o contenido de los artículos publicados."""
    query = select(BlogPost).filter(
        BlogPost.published.is_(True),
        or_(
            BlogPost.title.ilike(f"%{search_term}%"),
            BlogPost.excerpt.ilike(f"%{search_term}%"),
            BlogPost.content.ilike(f"%{search_term}%")
        )
    ).order_by(BlogPost.id).limit(top_k)
    result = await db.execute(query)
    return result.scalars().all()


async def create_post(db: AsyncSession, post: blog_schema.BlogPostCreate) -> BlogPost:
    db_post = BlogPost(**post.model_dump())
    db.add(db_post)
    await db.commit()
    await db.refresh(db_post)
    return db_post


async def update_post(db: AsyncSession, post_id: int, post_update: blog_schema.BlogPostUpdate) -> Optional[BlogPost]:
    db_post = await get_post(db, post_id)
    if not db_post:
        return None

    for key, value in post_update.model_dump(exclude_unset=True).items():
        setattr(db_post, key, value)

    await db.commit()
    await db.refresh(db_post)
    return db_post


async def delete_post(db: AsyncSession, post_id: int) -> Optional[BlogPost]:
    # Los comentarios se cargan antes para que el borrado en cascada no haga lazy-load
    result = await db.execute(
        select(BlogPost).options(selectinload(BlogPost.comments)).filter(BlogPost.id == post_id)
    )
    db_post = result.scalars().first()
    if db_post:
        await db.delete(db_post)
        await db.commit()
    return db_post


# ========================================
# COMENTARIOS
# ========================================

async def get_comments(db: AsyncSession, post_id: int) -> List[Comment]:
    result = await db.execute(
        select(Comment).filter(Comment.blog_post_id == post_id).order_by(Comment.created_at, Comment.id)
    )
    return result.scalars().all()


async def create_comment(db: AsyncSession, post: BlogPost, comment: blog_schema.CommentCreate) -> Comment:
    """Crea un comentario y mantiene el contador desnormalizado del artículo."""
    db_comment = Comment(blog_post_id=post.id, **comment.model_dump())
    db.add(db_comment)
    post.comment_count = (post.comment_count or 0) + 1
    await db.commit()
    await db.refresh(db_comment)
    return db_comment
