from typing import List, Optional
import logging

from ..core.config import settings
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from ..core.security import UserRole, create_access_token
from ..models.account import Account
from ..schemas.auth import UserLogin, UserRegister, TokenResponse, UserResponse
from .store import Store

logger = logging.getLogger(__name__)

class AuthService:
    def __init__(self, store: Store):
        self.store = store

    def register_user(self, user_data: UserRegister) -> Account:
        """Register a new account."""
        if user_data.role == UserRole.ADMIN and not settings.ALLOW_ADMIN_REGISTRATION:
            raise AuthorizationError("Admin accounts cannot be self-registered")

        # Check if account already exists
        if self.store.find_account_by_email(user_data.email):
            raise ValidationError("Email already registered")

        new_account = Account(
            name=user_data.name,
            email=user_data.email,
            password=user_data.password,
            role=user_data.role,
        )
        new_account = self.store.create_account(new_account)

        logger.info(f"Registered {new_account.role.value} account {new_account.id}")
        return new_account

    def authenticate_user(self, login_data: UserLogin) -> Account:
        """Check credentials and return the matching account."""
        account = self.store.find_account_by_email(login_data.email)

        if not account or not account.check_password(login_data.password):
            logger.info("Failed login attempt")
            raise AuthenticationError("Invalid email or password")

        return account

    def issue_token(self, account: Account) -> TokenResponse:
        """Create an access token response for an account."""
        return TokenResponse(
            access_token=create_access_token(account.id),
            expires_in=settings.ACCESS_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
            user=UserResponse.model_validate(account),
        )

    def login(self, login_data: UserLogin) -> TokenResponse:
        return self.issue_token(self.authenticate_user(login_data))

    def change_password(
        self,
        account: Account,
        current_password: str,
        new_password: str
    ) -> Account:
        """Replace an account's password after checking the current one."""
        if not account.check_password(current_password):
            raise ValidationError("Current password is incorrect")

        account.password = new_password
        account = self.store.save_account(account)

        logger.info(f"Password changed for account {account.id}")
        return account

    def list_accounts(self, role: Optional[UserRole] = None) -> List[Account]:
        return self.store.find_accounts(role)
