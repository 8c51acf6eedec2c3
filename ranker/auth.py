"""
Password hashing and JWT bearer authentication.

Every /api route except login and registration depends on require_user,
which resolves the bearer token to a user row.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from ranker.config import settings
from ranker.database import get_db
import logging

logger = logging.getLogger(__name__)


_pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)
_bearer = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash a plaintext password."""
    return _pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a plaintext password against a stored hash."""
    return _pwd_context.verify(password, password_hash)


def create_access_token(user_id: int, username: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed JWT for a user.

    Args:
        user_id: Database id of the user, stored as the ``sub`` claim
        username: Included for clients that want to display it
        expires_delta: Token lifetime (defaults to JWT_EXPIRES_MINUTES)

    Returns:
        Encoded token string
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_expires_minutes)
    payload = {
        "sub": str(user_id),
        "username": username,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> int:
    """
    Decode a token and return the user id it was issued for.

    Raises:
        ValueError: If the token is invalid, expired or has no usable subject
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise ValueError(f"Invalid token: {e}") from e

    sub = payload.get("sub")
    if not sub:
        raise ValueError("Invalid token payload")
    try:
        return int(sub)
    except (TypeError, ValueError) as e:
        raise ValueError("Invalid token subject") from e


def _unauthorized(detail: str = "Not authenticated") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def require_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> Dict[str, Any]:
    """
    Dependency that requires a valid bearer token.

    Returns:
        Dict with the authenticated user's ``id`` and ``username``

    Raises:
        HTTPException: 401 if the token is missing, invalid, or the user is gone
    """
    if credentials is None:
        raise _unauthorized()

    try:
        user_id = decode_access_token(credentials.credentials)
    except ValueError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise _unauthorized("Invalid token")

    async with get_db() as db:
        cursor = await db.execute(
            "SELECT id, username FROM users WHERE id = ?",
            (user_id,)
        )
        row = await cursor.fetchone()

    if not row:
        logger.warning(f"Token for unknown user id {user_id}")
        raise _unauthorized("User not found")

    return dict(row)
