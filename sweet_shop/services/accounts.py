import logging
from typing import Tuple

from sweet_shop.core.config import Settings
from sweet_shop.core.security import create_access_token, hash_password, verify_password
from sweet_shop.models.user import RoleType, User
from sweet_shop.services.errors import InvalidCredentialsError, UserAlreadyExistsError
from sweet_shop.stores.users import UserStore

logger = logging.getLogger(__name__)

class AccountService:
    def __init__(self, store: UserStore, settings: Settings):
        self.store = store
        self.settings = settings

    async def register(self, username: str, password: str) -> User:
        if await self.store.get_by_username(username):
            raise UserAlreadyExistsError(username)
        user = User(
            username=username,
            password_hash=hash_password(password),
            roles={RoleType.USER},
        )
        user = await self.store.save(user)
        logger.info("Registered user %s", username)
        return user

    async def login(self, username: str, password: str) -> Tuple[str, User]:
        user = await self.store.get_by_username(username)
        if not user or not verify_password(password, user.password_hash):
            logger.info("Failed login for %s", username)
            raise InvalidCredentialsError()
        return create_access_token(user, self.settings), user

    async def ensure_admin(self, username: str, password: str) -> User:
        existing = await self.store.get_by_username(username)
        if existing:
            return existing
        admin = User(
            username=username,
            password_hash=hash_password(password),
            roles={RoleType.ADMIN, RoleType.USER},
        )
        try:
            admin = await self.store.save(admin)
        except UserAlreadyExistsError:
            # another worker seeded it first
            return await self.store.get_by_username(username)
        logger.info("Created admin account %s", username)
        return admin
