# backend/app/api/v1/endpoints/admin.py
"""
Endpoints del back-office de la tienda.

Todas las rutas exigen la cabecera X-Admin-Token. Cubren el mantenimiento
del catálogo (productos y categorías), del blog, la moderación de
opiniones y la gestión de pedidos con sus cifras agregadas.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import logging

from app.api import deps
from app.crud import blog_crud, category_crud, order_crud, product_crud, testimonial_crud
from app.schemas import blog_schema, category_schema, order_schema, product_schema, testimonial_schema

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(deps.require_admin)])


# ========================================
# PRODUCTOS
# ========================================

async def _check_category(db: AsyncSession, category_id: Optional[int]) -> None:
    if category_id is not None and not await category_crud.get_category(db, category_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"La categoría {category_id} no existe")


@router.post("/products", response_model=product_schema.ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    *,
    db: AsyncSession = Depends(deps.get_db),
    product_in: product_schema.ProductCreate,
) -> product_schema.ProductResponse:
    """Crea un producto. El SKU y el slug deben ser únicos."""
    if await product_crud.get_product_by_sku(db, product_in.sku):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Ya existe un producto con el SKU {product_in.sku}")
    if await product_crud.get_product_by_slug(db, product_in.slug):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Ya existe un producto con el slug {product_in.slug}")
    await _check_category(db, product_in.category_id)

    product = await product_crud.create_product(db, product_in)
    logger.info(f"🆕 ADMIN: Producto creado {product.sku} (id={product.id})")
    return product


@router.put("/products/{product_id}", response_model=product_schema.ProductResponse)
async def update_product(
    *,
    db: AsyncSession = Depends(deps.get_db),
    product_id: int,
    product_in: product_schema.ProductUpdate,
) -> product_schema.ProductResponse:
    """Actualiza parcialmente un producto. Los carritos existentes conservan su precio congelado."""
    await _check_category(db, product_in.category_id)
    product = await product_crud.update_product(db, product_id, product_in)
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Producto no encontrado")
    logger.info(f"✏️ ADMIN: Producto actualizado id={product_id}")
    return product


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    *,
    db: AsyncSession = Depends(deps.get_db),
    product_id: int,
):
    """Elimina un producto. Si ya figura en pedidos, la base de datos lo impide."""
    try:
        product = await product_crud.delete_product(db, product_id)
    except IntegrityError:
        await db.rollback()
        logger.warning(f"⚠️ ADMIN: No se puede eliminar el producto {product_id}, tiene pedidos asociados")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="El producto tiene pedidos asociados")
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Producto no encontrado")
    logger.info(f"🗑️ ADMIN: Producto eliminado id={product_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ========================================
# CATEGORÍAS
# ========================================

@router.post("/categories", response_model=category_schema.CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    *,
    db: AsyncSession = Depends(deps.get_db),
    category_in: category_schema.CategoryCreate,
) -> category_schema.CategoryResponse:
    """Crea una categoría con slug único."""
    if await category_crud.get_category_by_slug(db, category_in.slug):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Ya existe una categoría con el slug {category_in.slug}")
    return await category_crud.create_category(db, category_in)


@router.put("/categories/{category_id}", response_model=category_schema.CategoryResponse)
async def update_category(
    *,
    db: AsyncSession = Depends(deps.get_db),
    category_id: int,
    category_in: category_schema.CategoryUpdate,
) -> category_schema.CategoryResponse:
    category = await category_crud.update_category(db, category_id, category_in)
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Categoría no encontrada")
    return category


# ========================================
# BLOG
# ========================================

@router.get("/blog/posts", response_model=List[blog_schema.BlogPostSummary])
async def read_all_posts(
    db: AsyncSession = Depends(deps.get_db),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
) -> List[blog_schema.BlogPostSummary]:
    """Lista todos los artículos, incluidos los borradores."""
    return await blog_crud.get_posts(db, skip=skip, limit=limit, published_only=False)


@router.post("/blog/posts", response_model=blog_schema.BlogPostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    *,
    db: AsyncSession = Depends(deps.get_db),
    post_in: blog_schema.BlogPostCreate,
) -> blog_schema.BlogPostResponse:
    if await blog_crud.get_post_by_slug(db, post_in.slug, published_only=False):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Ya existe un artículo con el slug {post_in.slug}")
    await _check_category(db, post_in.category_id)
    post = await blog_crud.create_post(db, post_in)
    logger.info(f"📝 ADMIN: Artículo creado '{post.slug}' (publicado={post.published})")
    return post


@router.put("/blog/posts/{post_id}", response_model=blog_schema.BlogPostResponse)
async def update_post(
    *,
    db: AsyncSession = Depends(deps.get_db),
    post_id: int,
    post_in: blog_schema.BlogPostUpdate,
) -> blog_schema.BlogPostResponse:
    await _check_category(db, post_in.category_id)
    post = await blog_crud.update_post(db, post_id, post_in)
    if not post:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Artículo no encontrado")
    return post


@router.delete("/blog/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    *,
    db: AsyncSession = Depends(deps.get_db),
    post_id: int,
):
    post = await blog_crud.delete_post(db, post_id)
    if not post:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Artículo no encontrado")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ========================================
# OPINIONES
# ========================================

@router.get("/testimonials", response_model=List[testimonial_schema.TestimonialResponse])
async def read_all_testimonials(
    db: AsyncSession = Depends(deps.get_db),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
) -> List[testimonial_schema.TestimonialResponse]:
    """Lista todas las opiniones, incluidas las pendientes de aprobación."""
    return await testimonial_crud.get_testimonials(db, skip=skip, limit=limit, approved_only=False)


@router.post("/testimonials/{testimonial_id}/approve", response_model=testimonial_schema.TestimonialResponse)
async def approve_testimonial(
    *,
    db: AsyncSession = Depends(deps.get_db),
    testimonial_id: int,
) -> testimonial_schema.TestimonialResponse:
    testimonial = await testimonial_crud.approve_testimonial(db, testimonial_id)
    if not testimonial:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Opinión no encontrada")
    logger.info(f"⭐ ADMIN: Opinión {testimonial_id} aprobada")
    return testimonial


@router.delete("/testimonials/{testimonial_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_testimonial(
    *,
    db: AsyncSession = Depends(deps.get_db),
    testimonial_id: int,
):
    testimonial = await testimonial_crud.delete_testimonial(db, testimonial_id)
    if not testimonial:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Opinión no encontrada")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ========================================
# PEDIDOS Y ESTADÍSTICAS
# ========================================

@router.get("/orders", response_model=List[order_schema.Order])
async def read_orders(
    db: AsyncSession = Depends(deps.get_db),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
    status_filter: Optional[order_schema.OrderStatus] = Query(default=None, alias="status"),
    session_id: Optional[str] = None,
) -> List[order_schema.Order]:
    """Lista pedidos, los más recientes primero."""
    return await order_crud.get_orders(db, skip=skip, limit=limit, status=status_filter, session_id=session_id)


@router.get("/orders/{order_id}", response_model=order_schema.Order)
async def read_order(
    *,
    db: AsyncSession = Depends(deps.get_db),
    order_id: int,
) -> order_schema.Order:
    order = await order_crud.get_order(db, order_id)
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pedido no encontrado")
    return order


@router.patch("/orders/{order_id}/status", response_model=order_schema.Order)
async def update_order_status(
    *,
    db: AsyncSession = Depends(deps.get_db),
    order_id: int,
    status_in: order_schema.OrderStatusUpdate,
) -> order_schema.Order:
    order = await order_crud.update_order_status(db, order_id, status_in.status)
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pedido no encontrado")
    logger.info(f"📦 ADMIN: Pedido {order_id} -> {status_in.status.value}")
    return order


@router.get("/stats", response_model=order_schema.StoreStats)
async def read_stats(db: AsyncSession = Depends(deps.get_db)) -> order_schema.StoreStats:
    """Cifras del panel: catálogo, stock bajo, pedidos e ingresos."""
    order_stats = await order_crud.get_order_stats(db)
    return order_schema.StoreStats(
        product_count=await product_crud.count_products(db),
        low_stock_count=await product_crud.count_low_stock(db),
        **order_stats,
    )
