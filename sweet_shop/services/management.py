# sweet_shop/services/management.py
import logging
from typing import Optional

from sweet_shop.models.sweet import Sweet, SweetUpdate
from sweet_shop.services.errors import SweetNotFoundError
from sweet_shop.services.locks import KeyedLock
from sweet_shop.stores.sweets import SweetStore

logger = logging.getLogger(__name__)

MERGED_FIELDS = ("name", "category", "price", "quantity")

class ManagementService:
    """Create, edit and remove sweets. Shares its lock table with InventoryService."""

    def __init__(self, store: SweetStore, locks: Optional[KeyedLock] = None):
        self.store = store
        self.locks = locks or KeyedLock()

    async def add_sweet(self, draft: Optional[Sweet]) -> Sweet:
        if draft is None:
            raise ValueError("Sweet cannot be null")
        sweet = await self.store.save(draft)
        logger.info("Added sweet %s (%s)", sweet.id, sweet.name)
        return sweet

    async def update_sweet(self, sweet_id: str, changes: Optional[SweetUpdate]) -> Sweet:
        """
        Overwrite the fields ``changes`` carries and keep the rest.

        ``changes=None`` is a read: the stored sweet comes back and nothing is
        written. An empty ``SweetUpdate`` still saves.
        """
        async with self.locks.hold(sweet_id):
            sweet = await self.store.get(sweet_id)
            if sweet is None:
                raise SweetNotFoundError(sweet_id)
            if changes is None:
                return sweet

            for field in MERGED_FIELDS:
                value = getattr(changes, field)
                if value is not None:
                    setattr(sweet, field, value)
            sweet = await self.store.save(sweet)

        logger.info("Updated sweet %s", sweet_id)
        return sweet

    async def delete_sweet(self, sweet_id: str) -> None:
        async with self.locks.hold(sweet_id):
            sweet = await self.store.get(sweet_id)
            if sweet is None:
                raise SweetNotFoundError(sweet_id)
            await self.store.delete(sweet)

        logger.info("Deleted sweet %s", sweet_id)
