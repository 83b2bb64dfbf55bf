import hashlib
import logging
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import bcrypt
from jose import jwt, JWTError
from passlib.context import CryptContext

from content_agent.core.config import SECRET_KEY, ALGORITHM, SESSION_TTL_DAYS

logger = logging.getLogger(__name__)

BCRYPT_MAX_BYTES = 72

# passlib only verifies hashes written before we switched to bcrypt directly
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def _password_bytes(password: str) -> bytes:
    """
    Encode a password for bcrypt, truncating to the 72 byte hard limit.

    Truncation never splits a multi-byte UTF-8 character.
    """
    password_bytes = password.encode("utf-8")
    if len(password_bytes) <= BCRYPT_MAX_BYTES:
        return password_bytes

    logger.warning("Password exceeds 72 bytes, truncating before hashing (validation should have caught this)")
    truncated = password_bytes[:BCRYPT_MAX_BYTES]
    # Drop a dangling partial character, if any
    return truncated.decode("utf-8", errors="ignore").encode("utf-8")


def hash_password(password: str) -> str:
    """
    Hash a password with a per-password bcrypt salt.

    Raises:
        ValueError: If the password cannot be hashed
    """
    try:
        return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt()).decode("utf-8")
    except Exception as e:
        logger.error(f"Password hashing failed: {e}", exc_info=True)
        raise ValueError("Invalid password") from e


def verify_password(password: str, hashed: str) -> bool:
    """
    Verify a password against its hash.

    Supports bcrypt-native hashes and legacy passlib-wrapped hashes.
    """
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        try:
            return pwd_context.verify(password, hashed)
        except Exception as e:
            logger.warning(f"Legacy password verification failed: {e}")
            return False


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Issue a signed token whose subject is the user id.

    Every token carries a random jti so two logins in the same second never
    produce the same token (and the same session token hash).
    """
    expire = datetime.utcnow() + (expires_delta or timedelta(days=SESSION_TTL_DAYS))
    to_encode = {
        "sub": str(user_id),
        "jti": uuid.uuid4().hex,
        "exp": expire,
    }
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Return the token payload, or None if the signature or expiry check fails."""
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None


def hash_token(token: str) -> str:
    """Digest stored in user_sessions instead of the raw token."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
