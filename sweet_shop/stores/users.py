# sweet_shop/stores/users.py
import uuid
from typing import Dict, Optional, Protocol, runtime_checkable

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from sweet_shop.models.user import RoleType, User
from sweet_shop.services.errors import UserAlreadyExistsError

@runtime_checkable
class UserStore(Protocol):
    async def get_by_username(self, username: str) -> Optional[User]:
        ...

    async def save(self, user: User) -> User:
        """Raises UserAlreadyExistsError when a new user reuses a taken username."""
        ...

class InMemoryUserStore:
    def __init__(self):
        self._users: Dict[str, User] = {}

    async def get_by_username(self, username: str) -> Optional[User]:
        user = self._users.get(username)
        return user.model_copy(deep=True) if user else None

    async def save(self, user: User) -> User:
        stored = user.model_copy(deep=True)
        if stored.id is None:
            if stored.username in self._users:
                raise UserAlreadyExistsError(stored.username)
            stored.id = str(uuid.uuid4())
        self._users[stored.username] = stored
        return stored.model_copy(deep=True)

class MongoUserStore:
    def __init__(self, db: AsyncIOMotorDatabase, collection: str = "users"):
        self.collection = db[collection]

    @staticmethod
    def _to_user(doc: dict) -> User:
        doc["id"] = str(doc.pop("_id"))
        doc["roles"] = {RoleType(r) for r in doc.get("roles", [])}
        return User(**doc)

    async def ensure_indexes(self) -> None:
        await self.collection.create_index("username", unique=True)

    async def get_by_username(self, username: str) -> Optional[User]:
        doc = await self.collection.find_one({"username": username})
        if not doc:
            return None
        return self._to_user(doc)

    async def save(self, user: User) -> User:
        doc = user.model_dump(exclude={"id"})
        # BSON has no set type
        doc["roles"] = sorted(r.value for r in user.roles)
        if user.id is None:
            doc["_id"] = str(uuid.uuid4())
            try:
                await self.collection.insert_one(doc)
            except DuplicateKeyError:
                raise UserAlreadyExistsError(user.username)
        else:
            doc["_id"] = user.id
            await self.collection.replace_one({"_id": user.id}, doc, upsert=True)
        return self._to_user(doc)
