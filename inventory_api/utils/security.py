from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
import jwt

from inventory_api.exceptions import UnauthorizedError

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = 10) -> str:
    """Hash a password with a per-password salt."""
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(
    claims: Dict[str, Any],
    secret: str,
    *,
    algorithm: str = "HS256",
    expires_hours: int = 24
) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        **claims,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(hours=expires_hours)).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_access_token(token: str, secret: str, *, algorithm: str = "HS256") -> Dict[str, Any]:
    """
    Verify a token's signature and expiry and return its claims.

    Raises:
        UnauthorizedError: If the token is malformed, expired or badly signed
    """
    try:
        return jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid or expired token")
