"""
Identity resolution and role-based access policy.

Authentication and authorization are separate steps: a request is first
turned into an Identity (or rejected as unauthenticated), and only then
checked against the role an operation requires.
"""
from dataclasses import dataclass
from typing import Optional
import logging

from ..core.exceptions import AuthenticationError, AuthorizationError, TokenInvalid
from ..core.security import UserRole, decode_access_token
from .store import Store

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"

@dataclass(frozen=True)
class Identity:
    """The caller behind a verified token, as currently stored."""
    id: int
    role: UserRole

def extract_bearer_token(authorization: Optional[str]) -> str:
    """Return the token from a ``Bearer <token>`` header value."""
    if not authorization:
        raise AuthenticationError("missing token")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != BEARER_SCHEME:
        raise AuthenticationError("missing token")

    return parts[1]

def resolve_identity(authorization: Optional[str], store: Store) -> Identity:
    """Resolve a raw Authorization header into the caller's live identity.

    The token only proves which account id it was issued for; the role is
    always read from the stored account so that role changes and removed
    accounts take effect immediately.
    """
    token = extract_bearer_token(authorization)

    try:
        account_id = decode_access_token(token)
    except TokenInvalid as exc:
        logger.info(f"Rejected token: {str(exc)}")
        raise AuthenticationError("invalid token")

    account = store.find_account_by_id(account_id)
    if account is None:
        raise AuthenticationError("account not found")

    return Identity(id=account.id, role=UserRole(account.role))

def authorize(identity: Identity, required_role: Optional[UserRole] = None) -> None:
    """Exact-match role check. ``None`` admits any authenticated identity."""
    if required_role is None:
        return

    if identity.role != required_role:
        logger.warning(
            f"Account {identity.id} with role {identity.role.value} denied "
            f"{required_role.value}-only operation"
        )
        raise AuthorizationError(
            f"Access denied. Required role: {required_role.value}"
        )
