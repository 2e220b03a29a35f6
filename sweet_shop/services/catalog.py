from typing import List, Optional

from sweet_shop.models.sweet import Sweet
from sweet_shop.services.errors import SweetNotFoundError
from sweet_shop.stores.sweets import SweetStore

class CatalogService:
    """Read-only views over the store."""

    def __init__(self, store: SweetStore):
        self.store = store

    async def list_sweets(self) -> List[Sweet]:
        return await self.store.list_all()

    async def get_sweet(self, sweet_id: str) -> Sweet:
        sweet = await self.store.get(sweet_id)
        if sweet is None:
            raise SweetNotFoundError(sweet_id)
        return sweet

    async def list_available(self) -> List[Sweet]:
        return await self.store.list_available()

    async def list_out_of_stock(self) -> List[Sweet]:
        return await self.store.list_out_of_stock()

    async def search(
        self,
        name: Optional[str] = None,
        category: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
    ) -> List[Sweet]:
        return await self.store.search(
            name=name, category=category, min_price=min_price, max_price=max_price
        )
