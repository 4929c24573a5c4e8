# backend/app/crud/order_crud.py
"""
Operaciones CRUD para el modelo Order.

Este módulo proporciona funciones para crear pedidos a partir de las líneas del
carrito, consultarlos, actualizar su estado y obtener cifras agregadas para el
panel de administración.
"""

from typing import List, Optional, Sequence
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.db.models.cart_model import CartItem
from app.db.models.order_model import Order, OrderItem
from app.schemas.cart_schema import CheckoutRequest
from app.schemas.order_schema import OrderStatus
from app.services.pricing import PriceSummary, to_money


def build_order(session_id: str, checkout: CheckoutRequest, lines: Sequence[CartItem], summary: PriceSummary) -> Order:
    """
    Construye (sin persistir) un pedido con sus items a partir de las líneas del carrito.
    Los precios son los congelados en el carrito, no los del catálogo actual.
    """
    db_order = Order(
        session_id=session_id,
        customer_name=checkout.customer_name,
        customer_email=checkout.customer_email,
        shipping_address=checkout.shipping_address,
        billing_address=checkout.billing_address or checkout.shipping_address,
        payment_method=checkout.payment_method,
        status=OrderStatus.PENDING.value,
        subtotal=summary.subtotal,
        shipping_fee=summary.shipping_fee,
        tax=summary.tax,
        total=summary.total,
    )
    db_order.items = [
        OrderItem(
            product_id=line.product_id,
            product_name=line.name,
            sku=line.sku,
            quantity=line.quantity,
            unit_price=line.price,
        )
        for line in lines
    ]
    return db_order


async def get_order(db: AsyncSession, order_id: int) -> Optional[Order]:
    """
    Obtiene un pedido por su ID con los items precargados.
    """
    result = await db.execute(
        select(Order)
        .options(selectinload(Order.items))
        .filter(Order.id == order_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def get_orders(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 20,
    status: Optional[OrderStatus] = None,
    session_id: Optional[str] = None,
) -> List[Order]:
    """
    Lista pedidos, los más recientes primero, con filtros opcionales.
    """
    query = select(Order).options(selectinload(Order.items))
    if status is not None:
        query = query.filter(Order.status == status.value)
    if session_id is not None:
        query = query.filter(Order.session_id == session_id)
    query = query.order_by(Order.created_at.desc(), Order.id.desc()).offset(skip).limit(limit)
    result = await db.execute(query)
    return result.scalars().all()


async def update_order_status(db: AsyncSession, order_id: int, status: OrderStatus) -> Optional[Order]:
    """
    Actualiza el estado de un pedido de forma asíncrona.
    """
    db_order = await get_order(db, order_id)
    if db_order:
        db_order.status = status.value
        await db.commit()
        db_order = await get_order(db, order_id)
    return db_order


async def get_order_stats(db: AsyncSession) -> dict:
    """Número de pedidos, pendientes e ingresos (sin contar cancelados)."""
    order_count = await db.scalar(select(func.count(Order.id))) or 0
    pending_count = await db.scalar(
        select(func.count(Order.id)).filter(Order.status == OrderStatus.PENDING.value)
    ) or 0
    revenue = await db.scalar(
        select(func.coalesce(func.sum(Order.total), 0)).filter(Order.status != OrderStatus.CANCELLED.value)
    )
    return {
        "order_count": order_count,
        "pending_order_count": pending_count,
        "revenue": to_money(revenue or 0),
    }
