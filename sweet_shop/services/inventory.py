# sweet_shop/services/inventory.py
"""
Stock transitions: purchase and restock.

Each call is one read and, on success, one write against the store, done
while holding the sweet's lock so concurrent purchases cannot oversell.
Quantities are not range-checked here; request validation is expected to
have rejected anything below 1. A negative purchase therefore adds stock and
yields a negative total.
"""
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from sweet_shop.models.sweet import Sweet, SweetSold
from sweet_shop.services.errors import NotEnoughStockError, SweetNotFoundError
from sweet_shop.services.locks import KeyedLock
from sweet_shop.stores.sweets import SweetStore

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

def total_amount(price: float, quantity: int) -> float:
    """``price * quantity`` rounded half-up to cents, e.g. 1.33 x 3 -> 3.99."""
    amount = Decimal(str(price)) * quantity
    return float(amount.quantize(CENT, rounding=ROUND_HALF_UP))

class InventoryService:
    def __init__(self, store: SweetStore, locks: Optional[KeyedLock] = None):
        self.store = store
        self.locks = locks or KeyedLock()

    async def _load(self, sweet_id: str) -> Sweet:
        sweet = await self.store.get(sweet_id)
        if sweet is None:
            raise SweetNotFoundError(sweet_id)
        return sweet

    async def purchase(self, sweet_id: str, quantity: int) -> SweetSold:
        async with self.locks.hold(sweet_id):
            sweet = await self._load(sweet_id)
            if sweet.quantity < quantity:
                logger.warning(
                    "Purchase of %d x %s refused, %d in stock", quantity, sweet_id, sweet.quantity
                )
                raise NotEnoughStockError(sweet.quantity)

            remaining = sweet.quantity - quantity
            amount = total_amount(sweet.price, quantity)
            sweet.quantity = remaining
            sweet = await self.store.save(sweet)

        logger.info("Sold %d x %s for %.2f, %d left", quantity, sweet_id, amount, remaining)
        return SweetSold(sweet=sweet, remaining=remaining, total_amount=amount)

    async def restock(self, sweet_id: str, quantity: int) -> Sweet:
        async with self.locks.hold(sweet_id):
            sweet = await self._load(sweet_id)
            sweet.quantity = sweet.quantity + quantity
            sweet = await self.store.save(sweet)

        logger.info("Restocked %s by %d, now %d", sweet_id, quantity, sweet.quantity)
        return sweet
