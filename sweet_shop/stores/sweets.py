# sweet_shop/stores/sweets.py
"""
Sweet record stores.

Services depend on the ``SweetStore`` protocol only. ``MongoSweetStore`` is the
production backend; ``InMemorySweetStore`` backs local runs and tests.
"""
import re
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Protocol, runtime_checkable

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from sweet_shop.models.sweet import Sweet
from sweet_shop.services.errors import SweetNotFoundError

@runtime_checkable
class SweetStore(Protocol):
    async def get(self, sweet_id: str) -> Optional[Sweet]:
        """Return the stored sweet, or None when the id is unknown."""
        ...

    async def save(self, sweet: Sweet) -> Sweet:
        """
        Insert when ``sweet.id`` is None, otherwise update. Refreshes ``updated_at``.

        Raises SweetNotFoundError when the id is not (or no longer) stored.
        """
        ...

    async def delete(self, sweet: Sweet) -> None:
        ...

    async def list_all(self) -> List[Sweet]:
        ...

    async def list_available(self) -> List[Sweet]:
        ...

    async def list_out_of_stock(self) -> List[Sweet]:
        ...

    async def search(
        self,
        name: Optional[str] = None,
        category: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
    ) -> List[Sweet]:
        ...

def _now() -> datetime:
    return datetime.now(timezone.utc)

# ---- In-memory ----
class InMemorySweetStore:
    def __init__(self):
        self._sweets: Dict[str, Sweet] = {}

    async def get(self, sweet_id: str) -> Optional[Sweet]:
        sweet = self._sweets.get(sweet_id)
        return sweet.model_copy(deep=True) if sweet else None

    async def save(self, sweet: Sweet) -> Sweet:
        now = _now()
        stored = sweet.model_copy(deep=True)
        if stored.id is None:
            stored.id = str(uuid.uuid4())
            stored.created_at = now
        elif stored.id not in self._sweets:
            raise SweetNotFoundError(stored.id)
        else:
            stored.created_at = self._sweets[stored.id].created_at
        stored.updated_at = now
        self._sweets[stored.id] = stored
        return stored.model_copy(deep=True)

    async def delete(self, sweet: Sweet) -> None:
        self._sweets.pop(sweet.id, None)

    async def list_all(self) -> List[Sweet]:
        return [s.model_copy(deep=True) for s in self._sweets.values()]

    async def list_available(self) -> List[Sweet]:
        return [s.model_copy(deep=True) for s in self._sweets.values() if s.quantity > 0]

    async def list_out_of_stock(self) -> List[Sweet]:
        return [s.model_copy(deep=True) for s in self._sweets.values() if s.quantity <= 0]

    async def search(self, name=None, category=None, min_price=None, max_price=None) -> List[Sweet]:
        results = []
        for sweet in self._sweets.values():
            if name is not None and name.lower() not in sweet.name.lower():
                continue
            if category is not None and category.lower() != sweet.category.lower():
                continue
            if min_price is not None and sweet.price < min_price:
                continue
            if max_price is not None and sweet.price > max_price:
                continue
            results.append(sweet.model_copy(deep=True))
        return results

# ---- MongoDB ----
class MongoSweetStore:
    def __init__(self, db: AsyncIOMotorDatabase, collection: str = "sweets"):
        self.collection = db[collection]

    @staticmethod
    def _to_sweet(doc: dict) -> Sweet:
        doc["id"] = str(doc.pop("_id"))
        return Sweet(**doc)

    async def _find(self, query: dict) -> List[Sweet]:
        sweets = []
        async for doc in self.collection.find(query):
            sweets.append(self._to_sweet(doc))
        return sweets

    async def get(self, sweet_id: str) -> Optional[Sweet]:
        doc = await self.collection.find_one({"_id": sweet_id})
        if not doc:
            return None
        return self._to_sweet(doc)

    async def save(self, sweet: Sweet) -> Sweet:
        now = _now()
        doc = sweet.model_dump(exclude={"id"})
        doc["updated_at"] = now
        if sweet.id is None:
            doc["_id"] = str(uuid.uuid4())
            doc["created_at"] = now
            await self.collection.insert_one(doc)
            return self._to_sweet(doc)

        # created_at is write-once
        doc.pop("created_at", None)
        saved = await self.collection.find_one_and_update(
            {"_id": sweet.id}, {"$set": doc}, return_document=ReturnDocument.AFTER
        )
        if saved is None:
            raise SweetNotFoundError(sweet.id)
        return self._to_sweet(saved)

    async def delete(self, sweet: Sweet) -> None:
        await self.collection.delete_one({"_id": sweet.id})

    async def list_all(self) -> List[Sweet]:
        return await self._find({})

    async def list_available(self) -> List[Sweet]:
        return await self._find({"quantity": {"$gt": 0}})

    async def list_out_of_stock(self) -> List[Sweet]:
        return await self._find({"quantity": {"$lte": 0}})

    async def search(self, name=None, category=None, min_price=None, max_price=None) -> List[Sweet]:
        query: dict = {}
        if name is not None:
            query["name"] = {"$regex": re.escape(name), "$options": "i"}
        if category is not None:
            query["category"] = {"$regex": f"^{re.escape(category)}$", "$options": "i"}
        price: dict = {}
        if min_price is not None:
            price["$gte"] = min_price
        if max_price is not None:
            price["$lte"] = max_price
        if price:
            query["price"] = price
        return await self._find(query)
