"""
Password hashing and JWT session token utilities.
"""

import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel

from app.config import settings

logger = logging.getLogger(__name__)


# Password hashing context; hashes below min_rounds are flagged for rehash
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__default_rounds=12,
    bcrypt__min_rounds=12,
)


class TokenError(str, Enum):
    """Reasons a token fails verification."""

    INVALID = "invalid_token"
    EXPIRED = "expired_token"


class TokenVerification(BaseModel):
    """Outcome of verifying a signed token."""

    claims: Optional[dict[str, Any]] = None
    error: Optional[TokenError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash. Malformed hashes never verify."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        logger.warning("Stored password hash could not be identified")
        return False


def hash_password(password: str) -> str:
    """Hash a password for storage."""
    return pwd_context.hash(password)


def password_needs_rehash(hashed_password: str) -> bool:
    """Check whether a stored hash uses outdated parameters."""
    try:
        return pwd_context.needs_update(hashed_password)
    except (ValueError, TypeError):
        return False


def issue_token(claims: dict[str, Any], ttl: timedelta) -> str:
    """
    Sign claims into a JWT that expires after ttl.

    Args:
        claims: Payload to embed
        ttl: Lifetime of the token

    Returns:
        Encoded JWT token
    """
    now = datetime.now(timezone.utc)
    payload = {
        **claims,
        "exp": now + ttl,
        "iat": now,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> TokenVerification:
    """
    Decode and validate a JWT token.

    The signing algorithm is pinned; tokens using any other algorithm
    (including "none") are rejected as invalid, as are tokens without exp.

    Args:
        token: Encoded JWT token

    Returns:
        TokenVerification carrying either the claims or the error kind
    """
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require_exp": True},
        )
    except ExpiredSignatureError:
        return TokenVerification(error=TokenError.EXPIRED)
    except JWTError:
        return TokenVerification(error=TokenError.INVALID)
    return TokenVerification(claims=claims)


def create_session_token(user: Any, external_token: str) -> str:
    """
    Create a session token carrying a snapshot of the user.

    Args:
        user: User record with id, first_name, last_name and email
        external_token: Identity token for the DashX client SDKs

    Returns:
        Encoded JWT token
    """
    claims = {
        "user": {
            "id": user.id,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "email": user.email,
        },
        "external_token": external_token,
    }
    return issue_token(
        claims, timedelta(minutes=settings.jwt_session_expire_minutes)
    )


def create_reset_token(email: str) -> str:
    """Create a short-lived password reset token."""
    return issue_token(
        {"email": email}, timedelta(minutes=settings.reset_token_expire_minutes)
    )


def session_user_id(claims: dict[str, Any]) -> Optional[str]:
    """Extract the user id from session token claims, if present."""
    user = claims.get("user")
    if not isinstance(user, dict):
        return None
    user_id = user.get("id")
    return str(user_id) if user_id is not None else None


def reset_email(claims: dict[str, Any]) -> Optional[str]:
    """Extract the email from reset token claims, if present."""
    email = claims.get("email")
    return email if isinstance(email, str) else None
