from fastapi import APIRouter, Depends, status

from ...api.deps import get_current_account, get_store, rate_limit_check
from ...services.auth_service import AuthService
from ...services.store import Store
from ...schemas.auth import (
    UserLogin, UserRegister, TokenResponse, UserResponse, ChangePassword
)
from ...models.account import Account

router = APIRouter(prefix="/auth", tags=["Authentication"])

@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    store: Store = Depends(get_store),
    _: None = Depends(rate_limit_check)
):
    """Register a new account and return an access token."""
    auth_service = AuthService(store)
    account = auth_service.register_user(user_data)
    return auth_service.issue_token(account)

@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: UserLogin,
    store: Store = Depends(get_store),
    _: None = Depends(rate_limit_check)
):
    """Authenticate and return an access token."""
    return AuthService(store).login(login_data)

@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_account: Account = Depends(get_current_account)
):
    """Get current account information."""
    return UserResponse.model_validate(current_account)

@router.post("/change-password")
async def change_password(
    password_data: ChangePassword,
    current_account: Account = Depends(get_current_account),
    store: Store = Depends(get_store)
):
    """Change the caller's password."""
    AuthService(store).change_password(
        current_account,
        password_data.current_password,
        password_data.new_password
    )
    return {"message": "Password changed successfully"}
