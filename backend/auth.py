"""
Plant recommender - bearer-token auth for the HTTP API.
A single configured user (AUTH_USERNAME / AUTH_PASSWORD); tokens are HS256 JWTs.
"""
import hmac
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from config import get_settings

ALGORITHM = "HS256"


def verify_user(username: str, password: str) -> bool:
    """Check credentials against the configured user."""
    settings = get_settings()
    return (
        hmac.compare_digest(username.encode(), settings.auth_username.encode())
        and hmac.compare_digest(password.encode(), settings.auth_password.encode())
    )


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.auth_secret_key, algorithm=ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """Decoded payload, or None when the token is invalid or expired."""
    try:
        return jwt.decode(token, get_settings().auth_secret_key, algorithms=[ALGORITHM])
    except JWTError:
        return None
