import asyncio
import uuid

import pytest

from sweet_shop.services.errors import NotEnoughStockError, SweetNotFoundError
from sweet_shop.services.inventory import total_amount


async def test_purchase_returns_remaining_and_total(inventory, store, make_sweet):
    sweet = await make_sweet(price=2.50, quantity=100)

    sold = await inventory.purchase(sweet.id, 5)

    assert sold.remaining == 95
    assert sold.total_amount == 12.50
    assert sold.sweet.quantity == 95
    assert (await store.get(sweet.id)).quantity == 95


async def test_purchase_rounds_total_to_cents(inventory, make_sweet):
    sweet = await make_sweet(price=1.33, quantity=100)

    sold = await inventory.purchase(sweet.id, 3)

    assert sold.remaining == 97
    assert sold.total_amount == 3.99


async def test_purchase_reads_once_and_writes_once(inventory, store, make_sweet):
    sweet = await make_sweet()

    await inventory.purchase(sweet.id, 1)

    assert store.calls == {"get": 1, "save": 1, "delete": 0}


async def test_purchase_more_than_stock_fails_without_writing(inventory, store, make_sweet):
    sweet = await make_sweet(quantity=100)

    with pytest.raises(NotEnoughStockError) as exc:
        await inventory.purchase(sweet.id, 150)

    assert exc.value.available == 100
    assert str(exc.value) == "Sweet Has Not Enough Quantity We Can Provide Only 100 Quantities !"
    assert store.calls["save"] == 0
    assert (await store.get(sweet.id)).quantity == 100


async def test_purchase_out_of_stock_sweet(inventory, make_sweet):
    sweet = await make_sweet(quantity=0)

    with pytest.raises(NotEnoughStockError) as exc:
        await inventory.purchase(sweet.id, 1)

    assert exc.value.available == 0


async def test_purchase_exact_stock_leaves_zero(inventory, make_sweet):
    sweet = await make_sweet(price=2.50, quantity=100)

    sold = await inventory.purchase(sweet.id, 100)

    assert sold.remaining == 0
    assert sold.total_amount == 250.0


async def test_purchase_unknown_sweet(inventory, store):
    missing = str(uuid.uuid4())

    with pytest.raises(SweetNotFoundError) as exc:
        await inventory.purchase(missing, 5)

    assert str(exc.value) == f"Sweet not found with id: {missing}"
    assert store.calls["save"] == 0


async def test_purchase_is_not_idempotent(inventory, make_sweet):
    sweet = await make_sweet(quantity=10)

    first = await inventory.purchase(sweet.id, 3)
    second = await inventory.purchase(sweet.id, 3)

    assert first.remaining == 7
    assert second.remaining == 4
    assert first.remaining != second.remaining


async def test_zero_quantity_purchase_still_saves(inventory, store, make_sweet):
    sweet = await make_sweet(quantity=100)

    sold = await inventory.purchase(sweet.id, 0)

    assert sold.remaining == 100
    assert sold.total_amount == 0.0
    assert store.calls["save"] == 1


async def test_negative_purchase_adds_stock(inventory, make_sweet):
    # engine trusts its caller; the HTTP layer rejects quantities below 1
    sweet = await make_sweet(price=2.50, quantity=100)

    sold = await inventory.purchase(sweet.id, -5)

    assert sold.remaining == 105
    assert sold.total_amount == -12.50


async def test_concurrent_purchases_never_oversell(inventory, store, make_sweet):
    sweet = await make_sweet(quantity=5)

    results = await asyncio.gather(
        inventory.purchase(sweet.id, 3),
        inventory.purchase(sweet.id, 3),
        return_exceptions=True,
    )

    sold = [r for r in results if not isinstance(r, Exception)]
    refused = [r for r in results if isinstance(r, NotEnoughStockError)]
    assert len(sold) == 1
    assert len(refused) == 1
    assert refused[0].available == 2
    assert (await store.get(sweet.id)).quantity == 2
    assert len(inventory.locks) == 0


async def test_restock_adds_to_stock(inventory, store, make_sweet):
    sweet = await make_sweet(quantity=0)

    restocked = await inventory.restock(sweet.id, 50)

    assert restocked.quantity == 50
    assert (await store.get(sweet.id)).quantity == 50
    assert store.calls == {"get": 2, "save": 1, "delete": 0}


async def test_restock_accepts_negative_delta(inventory, make_sweet):
    sweet = await make_sweet(quantity=10)

    restocked = await inventory.restock(sweet.id, -4)

    assert restocked.quantity == 6


async def test_restock_unknown_sweet(inventory, store):
    with pytest.raises(SweetNotFoundError):
        await inventory.restock(str(uuid.uuid4()), 50)

    assert store.calls["save"] == 0


@pytest.mark.parametrize(
    "price,quantity,expected",
    [(2.50, 5, 12.50), (1.33, 3, 3.99), (0.125, 1, 0.13), (19.99, 0, 0.0), (2.50, -5, -12.50)],
)
def test_total_amount(price, quantity, expected):
    assert total_amount(price, quantity) == expected


async def test_purchase_of_sweet_deleted_mid_transition(inventory, store, make_sweet, monkeypatch):
    sweet = await make_sweet(quantity=10)
    read = store.get

    async def read_then_vanish(sweet_id):
        found = await read(sweet_id)
        await store.delete(found)
        return found

    monkeypatch.setattr(store, "get", read_then_vanish)

    with pytest.raises(SweetNotFoundError):
        await inventory.purchase(sweet.id, 3)

    monkeypatch.undo()
    assert await store.get(sweet.id) is None
