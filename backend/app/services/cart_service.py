# backend/app/services/cart_service.py
"""
Servicio de Carrito de Compras para la aplicación.

Este servicio gestiona el carrito de una sesión de compra persistido en la
tabla cart_items. Es el lado remoto de la capa de sincronización del cliente
de la tienda: cada línea guarda una copia del producto tomada al añadirlo y
los precios del carrito se calculan siempre sobre esa copia.

Reglas principales:
- Una línea por producto y sesión; añadir un producto existente suma cantidades
- Al añadir, la cantidad se limita al stock disponible
- Al actualizar, una cantidad superior al stock se rechaza (nunca se recorta en silencio)
- Una línea nunca se guarda con cantidad 0
"""
import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud import order_crud, product_crud
from app.db.models.cart_model import CartItem
from app.db.models.order_model import Order
from app.db.models.product_model import Product
from app.schemas.cart_schema import Cart, CheckoutRequest, LineItem, PriceSummarySchema
from app.services.pricing import PriceSummary, PricingPolicy, calculate_summary

logger = logging.getLogger(__name__)


class InsufficientStockError(ValueError):
    """La cantidad pedida supera el stock disponible del producto."""


class EmptyCartError(ValueError):
    """Se intentó hacer checkout de un carrito sin líneas."""


class CartService:
    """
    Servicio para gestionar el carrito de compras de una sesión.
    """
    def __init__(self, db: AsyncSession, policy: PricingPolicy):
        self.db = db
        self.policy = policy

    # ========================================
    # CONSULTAS
    # ========================================

    async def get_lines(self, session_id: str) -> List[CartItem]:
        """Líneas del carrito en orden de inserción."""
        result = await self.db.execute(
            select(CartItem)
            .filter(CartItem.session_id == session_id)
            .order_by(CartItem.created_at, CartItem.id)
        )
        return list(result.scalars().all())

    async def get_line(self, session_id: str, line_item_id: str) -> Optional[CartItem]:
        result = await self.db.execute(
            select(CartItem).filter(CartItem.session_id == session_id, CartItem.id == line_item_id)
        )
        return result.scalars().first()

    def summarize(self, lines: List[CartItem]) -> PriceSummary:
        return calculate_summary(((line.price, line.quantity) for line in lines), self.policy)

    async def get_cart(self, session_id: str) -> Cart:
        """
        Obtiene el carrito completo con su resumen de precios recalculado.
        """
        lines = await self.get_lines(session_id)
        summary = self.summarize(lines)
        return Cart(
            session_id=session_id,
            items=[LineItem.from_record(line) for line in lines],
            item_count=sum(line.quantity for line in lines),
            summary=PriceSummarySchema(**summary.to_dict()),
        )

    # ========================================
    # MUTACIONES
    # ========================================

    async def add_item(self, session_id: str, product: Product, quantity: int) -> CartItem:
        """
        Añade un producto al carrito de la sesión.
        Si el producto ya existe, suma la cantidad; el resultado se limita al stock.
        """
        if quantity < 1:
            raise ValueError("La cantidad debe ser un entero positivo")
        if product.stock <= 0:
            raise InsufficientStockError(f"'{product.name}' está agotado")

        result = await self.db.execute(
            select(CartItem).filter(CartItem.session_id == session_id, CartItem.product_id == product.id)
        )
        line = result.scalars().first()

        if line is not None:
            line.quantity = min(line.quantity + quantity, product.stock)
        else:
            snapshot = product.to_snapshot()
            line = CartItem(
                session_id=session_id,
                product_id=product.id,
                quantity=min(quantity, product.stock),
                **snapshot,
            )
            self.db.add(line)

        await self.db.commit()
        await self.db.refresh(line)
        logger.info(f"Carrito {session_id}: producto {product.id} -> cantidad {line.quantity}")
        return line

    async def update_quantity(self, session_id: str, line_item_id: str, quantity: int) -> Optional[CartItem]:
        """
        Fija la cantidad de una línea. Devuelve None si la línea no existe.
        """
        if quantity < 1:
            raise ValueError("La cantidad debe ser un entero positivo; usa DELETE para quitar la línea")

        line = await self.get_line(session_id, line_item_id)
        if line is None:
            return None

        product = await product_crud.get_product(self.db, line.product_id)
        if product is not None and quantity > product.stock:
            raise InsufficientStockError(
                f"Stock insuficiente para {line.name}. Solicitado: {quantity}, Disponible: {product.stock}"
            )

        line.quantity = quantity
        await self.db.commit()
        await self.db.refresh(line)
        return line

    async def remove_item(self, session_id: str, line_item_id: str) -> bool:
        """
        Elimina una línea del carrito. Devuelve False si no existía.
        """
        line = await self.get_line(session_id, line_item_id)
        if line is None:
            return False
        await self.db.delete(line)
        await self.db.commit()
        return True

    async def clear(self, session_id: str) -> None:
        """
        Vacía completamente el carrito de la sesión en una sola sentencia.
        """
        await self.db.execute(delete(CartItem).where(CartItem.session_id == session_id))
        await self.db.commit()

    # ========================================
    # CHECKOUT
    # ========================================

    async def checkout(self, session_id: str, checkout: CheckoutRequest) -> Order:
        """
        Procesa el checkout:
        1. Verifica el stock de los productos en el carrito.
        2. Crea el pedido con los precios congelados del carrito.
        3. Descuenta las cantidades del stock.
        4. Vacía el carrito.
        Todo esto se ejecuta en una única transacción.
        """
        lines = await self.get_lines(session_id)
        if not lines:
            raise EmptyCartError("El carrito está vacío")

        try:
            # 1. VERIFICACIÓN DE STOCK
            for line in lines:
                product = await product_crud.get_product(self.db, line.product_id)
                available = product.stock if product is not None else 0
                if available < line.quantity:
                    raise InsufficientStockError(
                        f"Stock insuficiente para {line.name} (SKU: {line.sku}). Pedido: {line.quantity}, Disponible: {available}"
                    )

            # 2. CREACIÓN DE LA ORDEN
            summary = self.summarize(lines)
            order = order_crud.build_order(session_id, checkout, lines, summary)
            self.db.add(order)

            # 3. DEDUCCIÓN DE STOCK
            for line in lines:
                await product_crud.deduct_stock(self.db, line.product_id, line.quantity)

            # 4. VACIAR EL CARRITO
            await self.db.execute(delete(CartItem).where(CartItem.session_id == session_id))

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Checkout completado para la sesión {session_id}: pedido {order.id}, total {summary.total}")
        return await order_crud.get_order(self.db, order.id)
