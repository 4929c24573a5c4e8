# backend/app/storefront/cart_store.py
"""
Estado local del carrito de una sesión de compra.

El CartStore guarda las líneas del carrito como una tupla inmutable que se
sustituye entera en cada cambio, de modo que quien la lea (por ejemplo el
cálculo de precios) siempre ve un estado cerrado.

Cada mutación es optimista:
1. Se guarda el valor previo de la línea afectada.
2. Se aplica el cambio en local.
3. Se sincroniza con el servidor.
4. Si falla, se restaura sólo esa línea y se devuelve el error en el resultado.

Una línea sólo admite una mutación en curso; una segunda mutación sobre la
misma línea lanza ConcurrentModificationError. Líneas distintas pueden
sincronizarse a la vez.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

from app.core.config import settings
from app.schemas.cart_schema import LineItem, ProductSnapshot
from app.services.pricing import PriceSummary, PricingPolicy, calculate_summary
from app.storefront.errors import CartError, ConcurrentModificationError, NotFoundError, ValidationError
from app.storefront.sync import CartSyncClient

logger = logging.getLogger(__name__)

LOCAL_ID_PREFIX = "local:"
# Clave que ocupan clear() y refresh(): bloquea cualquier otra mutación
WHOLE_CART_KEY = "cart:*"


@dataclass(frozen=True)
class MutationResult:
    """Resultado de una mutación: la línea resultante si ok, el error si no."""
    ok: bool
    item: Optional[LineItem] = None
    error: Optional[CartError] = None


class CartStore:
    """
    Carrito local de una sesión, sincronizado con la API de la tienda.

    Se crea una instancia por sesión; no hay estado global.
    """

    def __init__(
        self,
        sync: CartSyncClient,
        policy: Optional[PricingPolicy] = None,
        items: Iterable[LineItem] = (),
    ):
        self._sync = sync
        self._policy = policy or PricingPolicy.from_settings(settings)
        self._items: Tuple[LineItem, ...] = tuple(items)
        self._in_flight: Dict[str, object] = {}
        # Último stock conocido por producto, para limitar los incrementos
        self._stock: Dict[int, int] = {}

    # ========================================
    # LECTURA
    # ========================================

    @property
    def items(self) -> Tuple[LineItem, ...]:
        return self._items

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self._items)

    def get(self, line_item_id: str) -> Optional[LineItem]:
        for item in self._items:
            if item.id == line_item_id:
                return item
        return None

    def summary(self) -> PriceSummary:
        """Resumen de precios calculado sobre la tupla actual."""
        items = self._items
        return calculate_summary(((item.product_snapshot.price, item.quantity) for item in items), self._policy)

    def is_pending(self, line_item_id: str) -> bool:
        return line_item_id in self._in_flight

    # ========================================
    # CONTROL DE CONCURRENCIA
    # ========================================

    def _check_not_pending(self, key: str) -> None:
        if key in self._in_flight or WHOLE_CART_KEY in self._in_flight:
            raise ConcurrentModificationError(
                "Hay un cambio pendiente en este artículo, espera a que termine",
                line_item_id=key,
            )

    def _acquire(self, key: str) -> object:
        self._check_not_pending(key)
        token = object()
        self._in_flight[key] = token
        return token

    def _release(self, key: str, token: object) -> None:
        if self._in_flight.get(key) is token:
            del self._in_flight[key]

    # ========================================
    # SUSTITUCIÓN DE LA TUPLA
    # ========================================

    def _find_by_product(self, product_id: int) -> Optional[LineItem]:
        for item in self._items:
            if item.product_id == product_id:
                return item
        return None

    def _put(self, line_item_id: str, new_item: Optional[LineItem]) -> None:
        """Sustituye (o elimina si new_item es None) la línea indicada, conservando su posición."""
        replaced = []
        for item in self._items:
            if item.id != line_item_id:
                replaced.append(item)
            elif new_item is not None:
                replaced.append(new_item)
        self._items = tuple(replaced)

    def _insert(self, index: int, item: LineItem) -> None:
        items = list(self._items)
        items.insert(min(index, len(items)), item)
        self._items = tuple(items)

    # ========================================
    # MUTACIONES
    # ========================================

    async def add(self, product_id: int, quantity: int = 1) -> MutationResult:
        """
        Añade un producto. Si ya está en el carrito suma la cantidad
        (limitada al stock conocido); si no, crea la línea con la copia
        del producto que devuelve el catálogo.
        """
        if quantity < 1:
            raise ValidationError("La cantidad debe ser al menos 1")

        product_key = f"product:{product_id}"
        product_token = self._acquire(product_key)
        try:
            existing = self._find_by_product(product_id)
            if existing is not None:
                return await self._increment(existing, quantity)
            return await self._append(product_id, quantity)
        finally:
            self._release(product_key, product_token)

    async def _increment(self, existing: LineItem, quantity: int) -> MutationResult:
        token = self._acquire(existing.id)
        try:
            new_quantity = existing.quantity + quantity
            stock = self._stock.get(existing.product_id)
            if stock is not None:
                if existing.quantity >= stock:
                    return MutationResult(
                        ok=False,
                        item=existing,
                        error=ValidationError(
                            f"No hay más stock de '{existing.product_snapshot.name}'", existing.id
                        ),
                    )
                new_quantity = min(new_quantity, stock)
            self._put(existing.id, existing.model_copy(update={"quantity": new_quantity}))

            result = await self._sync.add_item(existing.product_id, quantity)
        finally:
            self._release(existing.id, token)

        if result.ok:
            self._put(existing.id, result.value)
            return MutationResult(ok=True, item=result.value)

        self._put(existing.id, existing)
        logger.info(f"🛒 CARRITO: Incremento revertido en {existing.id}: {result.error.message}")
        return MutationResult(ok=False, item=existing, error=result.error)

    async def _append(self, product_id: int, quantity: int) -> MutationResult:
        fetched = await self._sync.fetch_product(product_id)
        if not fetched.ok:
            return MutationResult(ok=False, error=fetched.error)

        product = fetched.value
        self._stock[product_id] = product.stock
        if product.stock < 1:
            return MutationResult(ok=False, error=ValidationError(f"'{product.name}' está agotado"))

        provisional = LineItem(
            id=f"{LOCAL_ID_PREFIX}{uuid.uuid4().hex}",
            product_id=product_id,
            quantity=min(quantity, product.stock),
            product_snapshot=ProductSnapshot(
                name=product.name,
                price=product.price,
                compare_at_price=product.compare_at_price,
                image_url=product.image_url,
                sku=product.sku,
            ),
        )
        token = self._acquire(provisional.id)
        try:
            self._items = self._items + (provisional,)
            result = await self._sync.add_item(product_id, provisional.quantity)
        finally:
            self._release(provisional.id, token)

        if result.ok:
            self._put(provisional.id, result.value)
            return MutationResult(ok=True, item=result.value)

        self._put(provisional.id, None)
        logger.info(f"🛒 CARRITO: Alta revertida del producto {product_id}: {result.error.message}")
        return MutationResult(ok=False, error=result.error)

    async def update_quantity(self, line_item_id: str, quantity: int) -> MutationResult:
        """
        Fija la cantidad de una línea. Para quitarla hay que usar remove().
        """
        if quantity < 1:
            raise ValidationError("La cantidad debe ser al menos 1; usa eliminar para quitar el artículo", line_item_id)

        # Una línea con una eliminación en curso ya no está en la tupla
        self._check_not_pending(line_item_id)
        current = self.get(line_item_id)
        if current is None:
            return MutationResult(ok=False, error=NotFoundError("El artículo no está en el carrito", line_item_id))

        token = self._acquire(line_item_id)
        try:
            self._put(line_item_id, current.model_copy(update={"quantity": quantity}))
            result = await self._sync.update_quantity(line_item_id, quantity)
        finally:
            self._release(line_item_id, token)

        if result.ok:
            self._put(line_item_id, result.value)
            return MutationResult(ok=True, item=result.value)

        if isinstance(result.error, NotFoundError):
            # El servidor ya no la tiene: se elimina también en local
            self._put(line_item_id, None)
            return MutationResult(ok=False, error=result.error)

        self._put(line_item_id, current)
        logger.info(f"🛒 CARRITO: Cantidad revertida en {line_item_id}: {result.error.message}")
        return MutationResult(ok=False, item=current, error=result.error)

    async def remove(self, line_item_id: str) -> MutationResult:
        """Elimina una línea. Eliminar una línea que no existe no hace nada."""
        self._check_not_pending(line_item_id)
        current = self.get(line_item_id)
        if current is None:
            return MutationResult(ok=True)

        token = self._acquire(line_item_id)
        try:
            index = self._items.index(current)
            self._put(line_item_id, None)
            result = await self._sync.remove_item(line_item_id)
        finally:
            self._release(line_item_id, token)

        if result.ok or isinstance(result.error, NotFoundError):
            return MutationResult(ok=True)

        if self.get(line_item_id) is None:
            self._insert(index, current)
        logger.info(f"🛒 CARRITO: Eliminación revertida de {line_item_id}: {result.error.message}")
        return MutationResult(ok=False, item=current, error=result.error)

    async def clear(self) -> MutationResult:
        """
        Vacía el carrito de una vez. No se admite con otras mutaciones en curso.
        Si el servidor falla se restaura el carrito completo.
        """
        if self._in_flight:
            raise ConcurrentModificationError("Hay cambios pendientes en el carrito, espera a que terminen")

        token = self._acquire(WHOLE_CART_KEY)
        try:
            prior = self._items
            self._items = ()
            result = await self._sync.clear()
        finally:
            self._release(WHOLE_CART_KEY, token)

        if result.ok:
            return MutationResult(ok=True)

        self._items = prior
        logger.info(f"🛒 CARRITO: Vaciado revertido: {result.error.message}")
        return MutationResult(ok=False, error=result.error)

    async def refresh(self) -> MutationResult:
        """Sustituye el estado local por el carrito guardado en el servidor."""
        if self._in_flight:
            raise ConcurrentModificationError("Hay cambios pendientes en el carrito, espera a que terminen")

        token = self._acquire(WHOLE_CART_KEY)
        try:
            result = await self._sync.fetch_cart()
        finally:
            self._release(WHOLE_CART_KEY, token)

        if not result.ok:
            return MutationResult(ok=False, error=result.error)

        self._items = tuple(result.value.items)
        return MutationResult(ok=True)
