# backend/app/storefront/errors.py
"""
Errores del carrito en el cliente de la tienda.

Los errores de precondición local (ValidationError, ConcurrentModificationError)
los lanza el CartStore. Los fallos remotos (NotFoundError, NetworkError y las
validaciones rechazadas por el servidor) viajan dentro de un resultado.
Ninguno es fatal: la interfaz muestra el mensaje y el carrito sigue operativo.
"""

from typing import Optional


class CartError(Exception):
    """Error base del carrito. `message` es apto para mostrar al usuario."""

    def __init__(self, message: str, line_item_id: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line_item_id = line_item_id
        self.status_code = status_code

    def __repr__(self):
        return f"{type(self).__name__}({self.message!r}, line_item_id={self.line_item_id!r})"


class ValidationError(CartError):
    """Cantidad no válida, stock insuficiente o datos rechazados por el servidor."""


class ConcurrentModificationError(CartError):
    """Ya hay una mutación en curso sobre la misma línea."""


class NetworkError(CartError):
    """Fallo de transporte, timeout o error 5xx. El usuario puede reintentar."""


class NotFoundError(CartError):
    """La línea o el producto ya no existen en el servidor."""
