"""
Tests del CartStore con una capa de sincronización simulada
"""

import asyncio
from decimal import Decimal
from typing import List, Optional

import pytest

from app.schemas.cart_schema import Cart, LineItem, PriceSummarySchema, ProductSnapshot
from app.schemas.product_schema import ProductResponse
from app.storefront.cart_store import CartStore
from app.storefront.errors import ConcurrentModificationError, NetworkError, NotFoundError, ValidationError
from app.storefront.sync import SyncResult


def make_line(line_id: str, product_id: int, quantity: int, price: str = "10.00") -> LineItem:
    return LineItem(
        id=line_id,
        product_id=product_id,
        quantity=quantity,
        product_snapshot=ProductSnapshot(name=f"Producto {product_id}", price=Decimal(price), sku=f"SKU-{product_id}"),
    )


def make_product(product_id: int, price: str = "10.00", stock: int = 10) -> ProductResponse:
    return ProductResponse(
        id=product_id,
        name=f"Producto {product_id}",
        slug=f"producto-{product_id}",
        price=Decimal(price),
        sku=f"SKU-{product_id}",
        stock=stock,
    )


class StubSync:
    """
    Capa de sincronización en memoria.

    `fail_with` hace fallar la siguiente mutación con ese error y `gate`,
    si se define, retiene las mutaciones y la lectura del carrito hasta
    que se active.
    """

    def __init__(self, products: Optional[List[ProductResponse]] = None):
        self.products = {p.id: p for p in (products or [])}
        self.fail_with = None
        self.gate: Optional[asyncio.Event] = None
        self.calls = []
        self._next_id = 1

    async def _mutation(self, name, *args):
        self.calls.append((name,) + args)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            error, self.fail_with = self.fail_with, None
            return SyncResult(ok=False, error=error)
        return None

    async def add_item(self, product_id, quantity):
        failed = await self._mutation("add_item", product_id, quantity)
        if failed:
            return failed
        line_id = f"srv-{self._next_id}"
        self._next_id += 1
        product = self.products[product_id]
        line = LineItem(
            id=line_id,
            product_id=product_id,
            quantity=quantity,
            product_snapshot=ProductSnapshot(name=product.name, price=product.price, sku=product.sku),
        )
        return SyncResult(ok=True, value=line)

    async def update_quantity(self, line_item_id, quantity):
        failed = await self._mutation("update_quantity", line_item_id, quantity)
        if failed:
            return failed
        return SyncResult(ok=True, value=make_line(line_item_id, 1, quantity))

    async def remove_item(self, line_item_id):
        return await self._mutation("remove_item", line_item_id) or SyncResult(ok=True)

    async def clear(self):
        return await self._mutation("clear") or SyncResult(ok=True)

    async def fetch_product(self, product_id):
        if product_id not in self.products:
            return SyncResult(ok=False, error=NotFoundError("Producto no encontrado"))
        return SyncResult(ok=True, value=self.products[product_id])

    async def fetch_cart(self):
        if self.gate is not None:
            await self.gate.wait()
        items = [make_line("srv-a", 1, 2), make_line("srv-b", 2, 1, "5.00")]
        summary = PriceSummarySchema(
            subtotal=Decimal("25.00"), shipping_fee=Decimal("5.99"), tax=Decimal("1.75"),
            total=Decimal("32.74"), free_shipping_threshold=Decimal("50.00"),
            amount_to_free_shipping=Decimal("25.00"),
        )
        return SyncResult(ok=True, value=Cart(session_id="s", items=items, item_count=3, summary=summary))


@pytest.fixture
def sync():
    return StubSync(products=[make_product(42, "10.00", stock=10), make_product(7, "4.00", stock=2)])


class TestAdd:

    @pytest.mark.asyncio
    async def test_reference_scenario(self, sync, policy):
        store = CartStore(sync, policy)

        result = await store.add(42, 2)

        assert result.ok
        assert result.item.id == "srv-1"
        assert [item.id for item in store.items] == ["srv-1"]
        summary = store.summary()
        assert summary.subtotal == Decimal("20.00")
        assert summary.shipping_fee == Decimal("5.99")
        assert summary.tax == Decimal("1.40")
        assert summary.total == Decimal("27.39")

    @pytest.mark.asyncio
    async def test_existing_product_is_incremented(self, sync, policy):
        store = CartStore(sync, policy, items=[make_line("srv-9", 42, 1)])

        result = await store.add(42, 2)

        assert result.ok
        assert len(store.items) == 1
        assert ("add_item", 42, 2) in sync.calls

    @pytest.mark.asyncio
    async def test_new_line_is_clamped_to_stock(self, sync, policy):
        store = CartStore(sync, policy)

        await store.add(7, 5)

        assert sync.calls == [("add_item", 7, 2)]
        assert store.items[0].quantity == 2

    @pytest.mark.asyncio
    async def test_increment_at_known_stock_is_rejected_locally(self, sync, policy):
        store = CartStore(sync, policy)
        await store.add(7, 5)

        result = await store.add(7, 1)

        assert not result.ok
        assert isinstance(result.error, ValidationError)
        assert result.item.quantity == 2
        assert store.items[0].quantity == 2
        assert sync.calls == [("add_item", 7, 2)]
        assert not store.is_pending(store.items[0].id)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("quantity", [0, -3])
    async def test_non_positive_quantity_raises(self, sync, policy, quantity):
        store = CartStore(sync, policy)

        with pytest.raises(ValidationError):
            await store.add(42, quantity)
        assert store.items == ()

    @pytest.mark.asyncio
    async def test_unknown_product_returns_not_found(self, sync, policy):
        store = CartStore(sync, policy)

        result = await store.add(999, 1)

        assert not result.ok
        assert isinstance(result.error, NotFoundError)
        assert store.items == ()

    @pytest.mark.asyncio
    async def test_out_of_stock_product(self, policy):
        store = CartStore(StubSync(products=[make_product(3, stock=0)]), policy)

        result = await store.add(3, 1)

        assert not result.ok
        assert isinstance(result.error, ValidationError)
        assert store.items == ()

    @pytest.mark.asyncio
    async def test_failed_add_removes_provisional_line(self, sync, policy):
        store = CartStore(sync, policy)
        sync.fail_with = NetworkError("sin conexión")

        result = await store.add(42, 1)

        assert not result.ok
        assert isinstance(result.error, NetworkError)
        assert store.items == ()

    @pytest.mark.asyncio
    async def test_provisional_line_is_visible_while_pending(self, sync, policy):
        store = CartStore(sync, policy)
        sync.gate = asyncio.Event()

        task = asyncio.create_task(store.add(42, 1))
        await asyncio.sleep(0)

        assert len(store.items) == 1
        assert store.items[0].id.startswith("local:")
        assert store.summary().subtotal == Decimal("10.00")

        with pytest.raises(ConcurrentModificationError):
            await store.add(42, 1)

        sync.gate.set()
        result = await task
        assert result.ok
        assert store.items[0].id == "srv-1"


class TestUpdateQuantity:

    @pytest.mark.asyncio
    async def test_update(self, sync, policy):
        store = CartStore(sync, policy, items=[make_line("l1", 1, 1)])

        result = await store.update_quantity("l1", 4)

        assert result.ok
        assert store.get("l1").quantity == 4
        assert store.item_count == 4

    @pytest.mark.asyncio
    async def test_zero_raises_and_keeps_item(self, sync, policy):
        store = CartStore(sync, policy, items=[make_line("l1", 1, 3)])

        with pytest.raises(ValidationError):
            await store.update_quantity("l1", 0)

        assert store.get("l1").quantity == 3
        assert sync.calls == []

    @pytest.mark.asyncio
    async def test_failure_rolls_back_only_that_item(self, sync, policy):
        store = CartStore(sync, policy, items=[make_line("l1", 1, 1), make_line("l2", 2, 5)])
        sync.fail_with = ValidationError("Stock insuficiente", "l1", 409)

        result = await store.update_quantity("l1", 9)

        assert not result.ok
        assert isinstance(result.error, ValidationError)
        assert store.get("l1").quantity == 1
        assert store.get("l2").quantity == 5
        assert [item.id for item in store.items] == ["l1", "l2"]

    @pytest.mark.asyncio
    async def test_not_found_drops_item_locally(self, sync, policy):
        store = CartStore(sync, policy, items=[make_line("l1", 1, 1), make_line("l2", 2, 1)])
        sync.fail_with = NotFoundError("El artículo ya no existe", "l1", 404)

        result = await store.update_quantity("l1", 2)

        assert not result.ok
        assert isinstance(result.error, NotFoundError)
        assert store.get("l1") is None
        assert [item.id for item in store.items] == ["l2"]

    @pytest.mark.asyncio
    async def test_unknown_local_line(self, sync, policy):
        store = CartStore(sync, policy)

        result = await store.update_quantity("nope", 2)

        assert not result.ok
        assert isinstance(result.error, NotFoundError)
        assert sync.calls == []

    @pytest.mark.asyncio
    async def test_second_update_on_same_line_is_rejected(self, sync, policy):
        store = CartStore(sync, policy, items=[make_line("l1", 1, 1)])
        sync.gate = asyncio.Event()

        first = asyncio.create_task(store.update_quantity("l1", 3))
        await asyncio.sleep(0)
        assert store.is_pending("l1")

        with pytest.raises(ConcurrentModificationError):
            await store.update_quantity("l1", 5)

        sync.gate.set()
        result = await first

        assert result.ok
        assert store.get("l1").quantity == 3
        assert not store.is_pending("l1")

    @pytest.mark.asyncio
    async def test_distinct_lines_may_sync_concurrently(self, sync, policy):
        store = CartStore(sync, policy, items=[make_line("l1", 1, 1), make_line("l2", 2, 1)])
        sync.gate = asyncio.Event()

        first = asyncio.create_task(store.update_quantity("l1", 2))
        second = asyncio.create_task(store.update_quantity("l2", 3))
        await asyncio.sleep(0)
        sync.gate.set()

        results = await asyncio.gather(first, second)
        assert all(r.ok for r in results)
        assert store.get("l1").quantity == 2
        assert store.get("l2").quantity == 3

    @pytest.mark.asyncio
    async def test_items_tuple_is_replaced_not_mutated(self, sync, policy):
        store = CartStore(sync, policy, items=[make_line("l1", 1, 1)])
        before = store.items

        await store.update_quantity("l1", 2)

        assert before[0].quantity == 1
        assert store.items is not before


class TestRemoveAndClear:

    @pytest.mark.asyncio
    async def test_remove(self, sync, policy):
        store = CartStore(sync, policy, items=[make_line("l1", 1, 1)])

        result = await store.remove("l1")

        assert result.ok
        assert store.items == ()

    @pytest.mark.asyncio
    async def test_remove_is_idempotent(self, sync, policy):
        store = CartStore(sync, policy, items=[make_line("l1", 1, 1)])

        first = await store.remove("l1")
        second = await store.remove("l1")

        assert first.ok and second.ok
        assert sync.calls == [("remove_item", "l1")]

    @pytest.mark.asyncio
    async def test_remove_already_gone_on_server_counts_as_removed(self, sync, policy):
        store = CartStore(sync, policy, items=[make_line("l1", 1, 1)])
        sync.fail_with = NotFoundError("El artículo ya no existe", "l1", 404)

        result = await store.remove("l1")

        assert result.ok
        assert store.items == ()

    @pytest.mark.asyncio
    async def test_failed_remove_restores_position(self, sync, policy):
        store = CartStore(sync, policy, items=[make_line("l1", 1, 1), make_line("l2", 2, 1), make_line("l3", 3, 1)])
        sync.fail_with = NetworkError("timeout")

        result = await store.remove("l2")

        assert not result.ok
        assert [item.id for item in store.items] == ["l1", "l2", "l3"]

    @pytest.mark.asyncio
    async def test_clear(self, sync, policy):
        store = CartStore(sync, policy, items=[make_line("l1", 1, 1), make_line("l2", 2, 1)])

        result = await store.clear()

        assert result.ok
        assert store.items == ()
        assert store.summary().total == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_failed_clear_restores_whole_cart(self, sync, policy):
        store = CartStore(sync, policy, items=[make_line("l1", 1, 1), make_line("l2", 2, 1)])
        sync.fail_with = NetworkError("HTTP 503")

        result = await store.clear()

        assert not result.ok
        assert [item.id for item in store.items] == ["l1", "l2"]

    @pytest.mark.asyncio
    async def test_clear_with_pending_mutation_is_rejected(self, sync, policy):
        store = CartStore(sync, policy, items=[make_line("l1", 1, 1)])
        sync.gate = asyncio.Event()

        pending = asyncio.create_task(store.update_quantity("l1", 2))
        await asyncio.sleep(0)

        with pytest.raises(ConcurrentModificationError):
            await store.clear()

        sync.gate.set()
        await pending
        assert store.get("l1").quantity == 2

    @pytest.mark.asyncio
    async def test_line_with_pending_remove_rejects_other_mutations(self, sync, policy):
        store = CartStore(sync, policy, items=[make_line("l1", 1, 1)])
        sync.gate = asyncio.Event()
        sync.fail_with = NetworkError("timeout")

        first = asyncio.create_task(store.remove("l1"))
        await asyncio.sleep(0)
        assert store.get("l1") is None

        with pytest.raises(ConcurrentModificationError):
            await store.remove("l1")
        with pytest.raises(ConcurrentModificationError):
            await store.update_quantity("l1", 5)

        sync.gate.set()
        result = await first

        assert not result.ok
        assert [item.id for item in store.items] == ["l1"]
        assert store.get("l1").quantity == 1
        assert sync.calls == [("remove_item", "l1")]


class TestRefresh:

    @pytest.mark.asyncio
    async def test_refresh_replaces_local_state(self, sync, policy):
        store = CartStore(sync, policy, items=[make_line("stale", 9, 1)])

        result = await store.refresh()

        assert result.ok
        assert [item.id for item in store.items] == ["srv-a", "srv-b"]
        assert store.item_count == 3
        assert store.summary().subtotal == Decimal("25.00")

    @pytest.mark.asyncio
    async def test_mutations_during_refresh_are_rejected(self, sync, policy):
        store = CartStore(sync, policy, items=[make_line("l1", 1, 1)])
        sync.gate = asyncio.Event()

        pending = asyncio.create_task(store.refresh())
        await asyncio.sleep(0)

        with pytest.raises(ConcurrentModificationError):
            await store.update_quantity("l1", 3)
        with pytest.raises(ConcurrentModificationError):
            await store.remove("l1")
        with pytest.raises(ConcurrentModificationError):
            await store.add(42, 1)

        sync.gate.set()
        result = await pending

        assert result.ok
        assert [item.id for item in store.items] == ["srv-a", "srv-b"]
        assert sync.calls == []


class TestMixedSequence:
    """
    Secuencia de altas, cambios y bajas con fallos intercalados: tras cada
    paso ninguna línea puede quedar con cantidad menor que 1.
    """

    STEPS = [
        ("add", 42, 2, None),
        ("add", 7, 1, NetworkError("sin conexión")),
        ("add", 7, 1, None),
        ("update", 0, 5, ValidationError("Stock insuficiente", status_code=409)),
        ("update", 0, 3, None),
        ("update", 1, 2, NotFoundError("El artículo ya no existe", status_code=404)),
        ("remove", 0, None, NetworkError("HTTP 503")),
        ("add", 42, 1, None),
        ("update", 1, 0, None),
        ("add", 42, 1, NotFoundError("Producto no encontrado", status_code=404)),
        ("remove", 0, None, None),
    ]

    @pytest.mark.asyncio
    async def test_quantities_stay_positive(self, sync, policy):
        store = CartStore(sync, policy)

        for op, target, quantity, failure in self.STEPS:
            sync.fail_with = failure
            if op == "add":
                await store.add(target, quantity)
            elif op == "update" and quantity < 1:
                with pytest.raises(ValidationError):
                    await store.update_quantity(store.items[target].id, quantity)
            elif op == "update":
                await store.update_quantity(store.items[target].id, quantity)
            else:
                await store.remove(store.items[target].id)
            sync.fail_with = None

            assert all(item.quantity >= 1 for item in store.items), (op, target, store.items)
            assert len({item.id for item in store.items}) == len(store.items)

        assert [(item.id, item.quantity) for item in store.items] == [("srv-3", 1)]
        assert store.summary().subtotal == Decimal("10.00")
