from fastapi import APIRouter, Depends, status
from sweet_shop.deps import get_accounts
from sweet_shop.models.response import ApiResponse
from sweet_shop.models.user import UserCreate, UserLogin, SignupResponse, LoginResponse
from sweet_shop.services.accounts import AccountService

router = APIRouter(prefix="/api/auth", tags=["auth"])

@router.post("/register", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def register(user: UserCreate, accounts: AccountService = Depends(get_accounts)):
    # duplicates surface as UserAlreadyExistsError -> 208
    created = await accounts.register(user.username, user.password)
    return ApiResponse(
        message="User Registered Successfully !",
        data=SignupResponse(id=created.id, username=created.username),
    )

@router.post("/login", response_model=ApiResponse)
async def login(user: UserLogin, accounts: AccountService = Depends(get_accounts)):
    token, db_user = await accounts.login(user.username, user.password)
    return ApiResponse(
        message="Login successful",
        data=LoginResponse(jwt=token, user_id=db_user.id, roles=sorted(db_user.roles)),
    )
