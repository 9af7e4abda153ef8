from fastapi import Depends, HTTPException, status, Request
from sqlalchemy.orm import Session
from typing import Optional

from ..core.config import settings
from ..core.database import get_db, get_redis
from ..core.exceptions import AuthenticationError
from ..core.security import UserRole
from ..models.account import Account
from ..services.identity_service import Identity, authorize, resolve_identity
from ..services.store import Store

def get_store(db: Session = Depends(get_db)) -> Store:
    """Persistence gateway bound to the request's session."""
    return Store(db)

async def get_current_identity(
    request: Request,
    store: Store = Depends(get_store)
) -> Identity:
    """Resolve the caller from the Authorization header."""
    return resolve_identity(request.headers.get("Authorization"), store)

async def get_current_account(
    identity: Identity = Depends(get_current_identity),
    store: Store = Depends(get_store)
) -> Account:
    """Load the full stored account of the caller."""
    account = store.find_account_by_id(identity.id)
    if account is None:
        raise AuthenticationError("account not found")
    return account

# Role-based access control dependencies
def require_role(required_role: Optional[UserRole] = None):
    """Create a dependency that requires exactly one role (or any, for None)."""
    async def role_checker(
        identity: Identity = Depends(get_current_identity)
    ) -> Identity:
        authorize(identity, required_role)
        return identity

    return role_checker

# Specific role dependencies
get_admin_identity = require_role(UserRole.ADMIN)
get_doctor_identity = require_role(UserRole.DOCTOR)
get_patient_identity = require_role(UserRole.PATIENT)

# Rate limiting dependency
async def rate_limit_check(
    request: Request,
    redis_client = Depends(get_redis)
) -> None:
    """Fixed-window rate limiting for authentication endpoints."""
    client_ip = request.client.host if request.client else "unknown"
    key = f"rate_limit:{request.url.path}:{client_ip}"

    current_requests = redis_client.get(key)
    if current_requests is None:
        redis_client.setex(key, settings.RATE_LIMIT_WINDOW_SECONDS, 1)
    else:
        if int(current_requests) >= settings.RATE_LIMIT_REQUESTS:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many requests. Please try again later."
            )
        redis_client.incr(key)
