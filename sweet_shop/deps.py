# sweet_shop/deps.py
import uuid
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from sweet_shop.core.config import Settings
from sweet_shop.core.security import decode_access_token
from sweet_shop.models.user import RoleType, User
from sweet_shop.services.accounts import AccountService
from sweet_shop.services.catalog import CatalogService
from sweet_shop.services.inventory import InventoryService
from sweet_shop.services.management import ManagementService
from sweet_shop.stores.users import UserStore

bearer = HTTPBearer(auto_error=False)

# ---- Services wired up in create_app ----
def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store

def get_inventory(request: Request) -> InventoryService:
    return request.app.state.inventory

def get_management(request: Request) -> ManagementService:
    return request.app.state.management

def get_catalog(request: Request) -> CatalogService:
    return request.app.state.catalog

def get_accounts(request: Request) -> AccountService:
    return request.app.state.accounts

def valid_sweet_id(sweet_id: str) -> str:
    try:
        return str(uuid.UUID(sweet_id))
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid sweet id")

# ---- Auth ----
def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    settings: Settings = Depends(get_settings),
    users: UserStore = Depends(get_user_store),
) -> User:
    if credentials is None:
        raise _unauthorized("Authentication required")
    try:
        claims = decode_access_token(credentials.credentials, settings)
    except JWTError as e:
        raise _unauthorized(f"Invalid JWT token: {e}")

    username = claims.get("sub")
    user = await users.get_by_username(username) if username else None
    if user is None:
        raise _unauthorized("Authentication failed: unknown user")
    return user

def require_role(role: RoleType):
    async def guard(user: User = Depends(get_current_user)) -> User:
        if not user.has_role(role):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied: Insufficient permissions",
            )
        return user
    return guard
