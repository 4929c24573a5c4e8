# backend/app/storefront/sync.py
"""
Capa de sincronización del carrito.

Traduce cada mutación local del CartStore en una llamada HTTP a los endpoints
del carrito y clasifica el resultado:

- 2xx        -> SyncResult(ok=True, value=...)
- 404        -> NotFoundError
- otros 4xx  -> ValidationError
- 5xx, timeout o fallo de transporte -> NetworkError

Nunca lanza excepciones por fallos remotos y no reintenta: el reintento es
decisión del usuario. El timeout es el del cliente httpx.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

import httpx

from app.core.config import settings
from app.schemas.cart_schema import Cart, LineItem
from app.schemas.product_schema import ProductResponse
from app.storefront.errors import CartError, NetworkError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncResult:
    """Resultado de una llamada remota: valor si ok, error clasificado si no."""
    ok: bool
    value: Any = None
    error: Optional[CartError] = None


def classify_response(response: httpx.Response, line_item_id: Optional[str] = None) -> CartError:
    """Convierte una respuesta de error HTTP en el error de carrito que le corresponde."""
    try:
        body = response.json()
    except ValueError:
        body = None
    # FastAPI devuelve una lista en los 422; sólo se usa el detalle si es texto
    detail = body.get("detail") if isinstance(body, dict) else None
    if not isinstance(detail, str):
        detail = None

    code = response.status_code
    if code == 404:
        return NotFoundError(detail or "El artículo ya no existe", line_item_id, code)
    if 400 <= code < 500:
        return ValidationError(detail or f"Datos no válidos (HTTP {code})", line_item_id, code)
    return NetworkError(detail or f"Error del servidor (HTTP {code}), inténtalo de nuevo", line_item_id, code)


class CartSyncClient:
    """
    Cliente HTTP del carrito de una sesión de compra.

    Args:
        session_id: identificador de la sesión, enviado en la cabecera X-Session-Id
        base_url: raíz de la API (por defecto STOREFRONT_API_URL)
        timeout: segundos por petición (por defecto STOREFRONT_TIMEOUT)
        transport: transporte httpx alternativo (ASGI o mock en pruebas)
    """

    def __init__(
        self,
        session_id: str,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.session_id = session_id
        self.base_url = (base_url or settings.STOREFRONT_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.STOREFRONT_TIMEOUT
        self._transport = transport

    def _get_api_client(self) -> httpx.AsyncClient:
        """Crea un cliente HTTP contra la API de la tienda con la cabecera de sesión."""
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={"X-Session-Id": self.session_id},
            transport=self._transport,
        )

    async def _request(
        self,
        method: str,
        url: str,
        parse: Optional[Callable[[Any], Any]] = None,
        json: Optional[dict] = None,
        line_item_id: Optional[str] = None,
    ) -> SyncResult:
        try:
            async with self._get_api_client() as client:
                response = await client.request(method, url, json=json)
        except httpx.HTTPError as e:
            logger.warning(f"🌐 SYNC: {method} {url} falló por transporte: {e!r}")
            return SyncResult(ok=False, error=NetworkError("No se pudo contactar con la tienda, inténtalo de nuevo", line_item_id))

        if response.is_error:
            error = classify_response(response, line_item_id)
            logger.info(f"🌐 SYNC: {method} {url} -> {response.status_code} ({type(error).__name__})")
            return SyncResult(ok=False, error=error)

        if parse is None:
            return SyncResult(ok=True)
        try:
            return SyncResult(ok=True, value=parse(response.json()))
        except ValueError as e:
            logger.error(f"🌐 SYNC: Respuesta no válida de {method} {url}: {e}")
            return SyncResult(ok=False, error=NetworkError("Respuesta no válida del servidor", line_item_id, response.status_code))

    # ========================================
    # MUTACIONES
    # ========================================

    async def add_item(self, product_id: int, quantity: int) -> SyncResult:
        return await self._request(
            "POST", "/cart/items",
            parse=LineItem.model_validate,
            json={"product_id": product_id, "quantity": quantity},
        )

    async def update_quantity(self, line_item_id: str, quantity: int) -> SyncResult:
        return await self._request(
            "PATCH", f"/cart/items/{line_item_id}",
            parse=LineItem.model_validate,
            json={"quantity": quantity},
            line_item_id=line_item_id,
        )

    async def remove_item(self, line_item_id: str) -> SyncResult:
        return await self._request("DELETE", f"/cart/items/{line_item_id}", line_item_id=line_item_id)

    async def clear(self) -> SyncResult:
        return await self._request("DELETE", "/cart")

    # ========================================
    # CONSULTAS
    # ========================================

    async def fetch_cart(self) -> SyncResult:
        """Carrito completo de la sesión tal y como lo guarda el servidor."""
        return await self._request("GET", "/cart", parse=Cart.model_validate)

    async def fetch_product(self, product_id: int) -> SyncResult:
        """Ficha del catálogo; de ella sale la copia del producto y el stock."""
        return await self._request("GET", f"/products/id/{product_id}", parse=ProductResponse.model_validate)
