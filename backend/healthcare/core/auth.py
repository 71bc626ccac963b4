import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from passlib.context import CryptContext
from jose import JWTError, jwt

from healthcare.config.settings import settings

logger = logging.getLogger(__name__)

# Update the CryptContext initialization to explicitly set bcrypt backend options
# This will suppress the warning about '__about__' attribute
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__ident="2b",  # Explicitly set the bcrypt identifier
    bcrypt__rounds=settings.bcrypt_rounds,
)


@dataclass(frozen=True)
class Caller:
    """Identity of the user behind a request."""
    id: int
    email: str


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Constant-time check of a password against its stored bcrypt form.

    A malformed or unrecognised stored value counts as a failed verification.
    """
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        logger.warning("Stored password hash could not be parsed; treating as mismatch")
        return False


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(
    user_id: int,
    email: str,
    expires_delta: Optional[timedelta] = None,
    secret_key: Optional[str] = None,
) -> str:
    issued_at = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    to_encode = {
        "sub": str(user_id),
        "email": email,
        "iat": issued_at,
        "exp": issued_at + expires_delta,
    }
    return jwt.encode(to_encode, secret_key or settings.secret_key, algorithm=settings.algorithm)


def validate_access_token(token: str, secret_key: Optional[str] = None) -> Optional[Caller]:
    """Return the token's claims, or None when the token is invalid.

    Signature mismatch, expiry, a malformed token and missing claims all
    come back as None so the caller can decide how to reject the request.
    """
    if not token:
        return None
    try:
        payload = jwt.decode(token, secret_key or settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as e:
        logger.info(f"Rejected bearer token: {e}")
        return None

    sub, email = payload.get("sub"), payload.get("email")
    if sub is None or email is None or "exp" not in payload:
        return None
    try:
        return Caller(id=int(sub), email=email)
    except (TypeError, ValueError):
        return None
