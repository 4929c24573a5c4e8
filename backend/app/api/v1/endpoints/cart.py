# backend/app/api/v1/endpoints/cart.py
"""
Este archivo contiene los endpoints para el carrito de compras.

Se encarga de gestionar las operaciones de agregar productos, actualizar cantidades,
eliminar productos, obtener el contenido del carrito y procesar el checkout.
El carrito se identifica por la cabecera X-Session-Id.

Códigos de estado que consume el cliente de la tienda:
- 404: línea o producto inexistente (el cliente elimina la línea local)
- 409 / 422: validación (stock insuficiente, cantidad no positiva)
- 5xx: error de red o servidor (el cliente conserva su estado y permite reintentar)
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.api import deps
from app.crud import product_crud
from app.schemas.cart_schema import Cart, CartItemCreate, CartItemUpdate, CheckoutRequest, LineItem
from app.schemas.order_schema import Order
from app.services.cart_service import CartService, EmptyCartError, InsufficientStockError
from app.services.pricing import PricingPolicy

logger = logging.getLogger(__name__)

# Router para el carrito de compras
router = APIRouter()

def get_cart_service(
    db: AsyncSession = Depends(deps.get_db),
    policy: PricingPolicy = Depends(deps.get_pricing_policy),
) -> CartService:
    """
    Dependencia para obtener el servicio de carrito.
    """
    return CartService(db, policy)

@router.get("", response_model=Cart)
async def get_cart(
    session_id: str = Depends(deps.get_session_id),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Obtiene el contenido del carrito con el resumen de precios recalculado.
    """
    return await cart_service.get_cart(session_id)

@router.post("/items", status_code=status.HTTP_201_CREATED, response_model=LineItem)
async def add_item_to_cart(
    item: CartItemCreate,
    session_id: str = Depends(deps.get_session_id),
    db: AsyncSession = Depends(deps.get_db),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Añade un producto al carrito. Si ya estaba, suma la cantidad (limitada al stock).
    """
    product = await product_crud.get_product(db, item.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Producto no encontrado")

    try:
        line = await cart_service.add_item(session_id, product, item.quantity)
    except InsufficientStockError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return LineItem.from_record(line)

@router.patch("/items/{line_item_id}", response_model=LineItem)
async def update_cart_item(
    line_item_id: str,
    item: CartItemUpdate,
    session_id: str = Depends(deps.get_session_id),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Fija la cantidad de una línea del carrito.
    """
    try:
        line = await cart_service.update_quantity(session_id, line_item_id, item.quantity)
    except InsufficientStockError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if line is None:
        raise HTTPException(status_code=404, detail="Línea de carrito no encontrada")
    return LineItem.from_record(line)

@router.delete("/items/{line_item_id}", status_code=204)
async def remove_item_from_cart(
    line_item_id: str,
    session_id: str = Depends(deps.get_session_id),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Elimina una línea del carrito.
    """
    removed = await cart_service.remove_item(session_id, line_item_id)
    if not removed:
        raise HTTPException(status_code=404, detail="Línea de carrito no encontrada")
    return Response(status_code=204)

@router.delete("", status_code=204)
async def clear_cart(
    session_id: str = Depends(deps.get_session_id),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Vacía completamente el carrito de la sesión.
    """
    await cart_service.clear(session_id)
    return Response(status_code=204)

@router.post("/checkout", status_code=status.HTTP_201_CREATED, response_model=Order)
async def checkout(
    checkout_in: CheckoutRequest,
    session_id: str = Depends(deps.get_session_id),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Convierte el carrito en un pedido: verifica stock, crea la orden con los
    precios congelados, descuenta stock y vacía el carrito en una transacción.
    """
    try:
        return await cart_service.checkout(session_id, checkout_in)
    except EmptyCartError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InsufficientStockError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.exception(f"Error inesperado durante el checkout de la sesión {session_id}")
        raise HTTPException(status_code=500, detail=f"Ocurrió un error inesperado durante el checkout: {e}")
