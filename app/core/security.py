from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from enum import Enum

from .config import settings
from .exceptions import TokenInvalid

# Password hashing
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

class UserRole(str, Enum):
    ADMIN = "admin"
    DOCTOR = "doctor"
    PATIENT = "patient"

# Password utilities
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against its hash."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Unrecognised or empty hash
        return False

def get_password_hash(password: str) -> str:
    """Generate a salted password hash."""
    return pwd_context.hash(password)

# JWT utilities
def create_access_token(
    account_id: int,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create a signed JWT bound to a single account id."""
    if expires_delta is None:
        expires_delta = timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)

    to_encode = {
        "sub": str(account_id),
        "exp": datetime.utcnow() + expires_delta,
    }

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )

def decode_access_token(token: str) -> int:
    """Verify a JWT and return the account id it was issued for.

    Raises TokenInvalid on a bad signature, an expired token or a payload
    without an integer subject.
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
    except JWTError as exc:
        raise TokenInvalid(str(exc)) from exc

    subject = payload.get("sub")
    if subject is None or "exp" not in payload:
        raise TokenInvalid("Token payload is missing required claims")

    try:
        return int(subject)
    except (TypeError, ValueError) as exc:
        raise TokenInvalid("Token subject is not an account id") from exc
