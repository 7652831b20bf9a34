"""JWT creation/verification and password hashing."""

from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import uuid4

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import get_settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS = "access"
REFRESH = "refresh"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def _encode(claims: dict, expires_in: timedelta) -> str:
    settings = get_settings()
    payload = {**claims, "exp": datetime.now(timezone.utc) + expires_in}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def create_access_token(sub: str) -> str:
    settings = get_settings()
    return _encode(
        {"sub": sub, "type": ACCESS},
        timedelta(minutes=settings.access_token_expire_minutes),
    )


def create_refresh_token(sub: str) -> str:
    settings = get_settings()
    return _encode(
        {"sub": sub, "type": REFRESH, "jti": str(uuid4())},
        timedelta(days=settings.refresh_token_expire_days),
    )


def decode_token(token: str, expected_type: Optional[str] = None) -> Optional[dict]:
    """Return claims, or None when the token is invalid, expired or of another type."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
    if expected_type and payload.get("type") != expected_type:
        return None
    return payload
