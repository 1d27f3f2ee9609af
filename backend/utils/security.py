"""Password hashing (bcrypt) and admin bearer tokens (JWT)."""
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from utils.config import SECRET_KEY, TOKEN_ALGORITHM, TOKEN_TTL_MINUTES


class InvalidToken(Exception):
    """Token missing, expired, or not signed by us."""


def hash_password(password: str) -> str:
    """Hash a plaintext password with bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=12)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """True if password matches the stored bcrypt hash. Malformed hashes never match."""
    try:
        return bool(bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8")))
    except (ValueError, AttributeError):
        return False


def create_access_token(
    *,
    subject: str,
    email: str,
    name: str,
    ttl_minutes: int = TOKEN_TTL_MINUTES,
    secret: str = SECRET_KEY,
) -> tuple[str, datetime]:
    """Return (token, expires_at) for an admin session."""
    now = datetime.now(timezone.utc)
    expires_at = now + timedelta(minutes=ttl_minutes)
    payload = {
        "sub": subject,
        "email": email,
        "name": name,
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=TOKEN_ALGORITHM), expires_at


def decode_access_token(token: str, secret: str = SECRET_KEY) -> dict[str, Any]:
    """Decode and verify a token. Raises InvalidToken with a short reason."""
    token = (token or "").strip()
    if not token:
        raise InvalidToken("Missing token")
    try:
        payload = jwt.decode(token, secret, algorithms=[TOKEN_ALGORITHM])
    except jwt.ExpiredSignatureError as e:
        raise InvalidToken("Token expired") from e
    except jwt.InvalidTokenError as e:
        raise InvalidToken("Invalid token") from e
    if not payload.get("sub"):
        raise InvalidToken("Invalid token")
    return payload
