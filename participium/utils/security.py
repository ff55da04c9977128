"""
Security utilities: password hashing and signed session tokens.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
import logging

from jose import JWTError, jwt
from passlib.context import CryptContext

from participium.core.settings import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password or not password_hash:
        return False
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError as e:
        logger.warning(f"Unreadable password hash: {e}")
        return False


def create_session_token(user_id: str, roles: list) -> str:
    """
    Create a signed session token for a user.

    Args:
        user_id: Firestore user document ID
        roles: User roles at login time (informational; routes reload the user)

    Returns:
        Encoded JWT string
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "roles": list(roles or []),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=settings.SESSION_EXPIRE_MINUTES)).timestamp()),
    }
    return jwt.encode(payload, settings.SESSION_SECRET, algorithm=settings.SESSION_ALGORITHM)


def decode_session_token(token: str) -> Optional[Dict]:
    """Return the token claims, or None when the token is invalid or expired."""
    try:
        return jwt.decode(token, settings.SESSION_SECRET, algorithms=[settings.SESSION_ALGORITHM])
    except JWTError:
        return None
