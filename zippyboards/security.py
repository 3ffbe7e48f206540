"""Password hashing and access token helpers."""
from datetime import timedelta
from typing import Any, Dict, Optional

import bcrypt
import jwt

from zippyboards.config import Settings, settings as default_settings
from zippyboards.utils.timestamps import utcnow

TOKEN_AUDIENCE = "authenticated"

# bcrypt only looks at the first 72 bytes of a secret
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    secret = password.encode("utf-8")
    if len(secret) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(secret, password_hash.encode("utf-8"))


def create_access_token(
    *,
    user_id: str,
    email: str,
    session_id: str,
    expires_delta: Optional[timedelta] = None,
    settings: Settings = default_settings,
) -> str:
    issued_at = utcnow()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {
        "sub": user_id,
        "email": email,
        "sid": session_id,
        "aud": TOKEN_AUDIENCE,
        "iat": issued_at,
        "exp": issued_at + expires_delta,
    }
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings = default_settings) -> Dict[str, Any]:
    """Decode and verify ``token``; raises ``jwt.InvalidTokenError`` when it is not valid."""
    return jwt.decode(
        token,
        settings.JWT_SECRET_KEY,
        algorithms=[settings.JWT_ALGORITHM],
        audience=TOKEN_AUDIENCE,
        options={"require": ["sub", "sid", "exp"]},
    )
