"""Auth: register, login, token refresh, forgot/reset password."""

import logging
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional
from sqlalchemy.orm import Session

from app.config import get_settings
from app.core.security import (
    REFRESH,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from app.db.models.user import User
from app.db.models.password_reset import PasswordResetToken
from app.services.notification_service import notify_password_reset, notify_welcome

logger = logging.getLogger(__name__)


def _issue_tokens(user: User) -> tuple[str, str]:
    return create_access_token(str(user.id)), create_refresh_token(str(user.id))


def register(
    db: Session,
    email: str,
    password: str,
    name: Optional[str] = None,
) -> tuple[User, str, str]:
    """Create user and send the welcome email (detached). Return (user, access, refresh)."""
    if db.query(User).filter(User.email == email).first():
        raise ValueError("Email already registered")
    user = User(
        id=uuid.uuid4(),
        email=email,
        password_hash=hash_password(password),
        name=name or email.split("@")[0],
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s", user.id)
    notify_welcome(user.email, user.name)
    access, refresh = _issue_tokens(user)
    return user, access, refresh


def login(db: Session, email: str, password: str) -> tuple[User, str, str]:
    """Authenticate user; return (user, access, refresh)."""
    user = db.query(User).filter(User.email == email).first()
    if not user or not user.password_hash or not verify_password(password, user.password_hash):
        raise ValueError("Invalid email or password")
    access, refresh = _issue_tokens(user)
    return user, access, refresh


def refresh_tokens(db: Session, refresh_token: str) -> tuple[User, str, str]:
    """Validate refresh token and return (user, new_access_token, new_refresh_token)."""
    payload = decode_token(refresh_token, expected_type=REFRESH)
    if not payload or not payload.get("sub"):
        raise ValueError("Invalid refresh token")
    try:
        user_id = uuid.UUID(payload["sub"])
    except ValueError:
        raise ValueError("Invalid refresh token")
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise ValueError("User not found")
    access, refresh = _issue_tokens(user)
    return user, access, refresh


def request_password_reset(db: Session, email: str) -> None:
    """Create a password reset token for the user if email exists. Always returns without error."""
    user = db.query(User).filter(User.email == email).first()
    if not user or not user.password_hash:
        return
    # Invalidate any existing tokens for this user
    db.query(PasswordResetToken).filter(PasswordResetToken.user_id == user.id).delete()
    token = secrets.token_urlsafe(32)
    expires_at = datetime.now(timezone.utc) + timedelta(
        minutes=get_settings().password_reset_expire_minutes
    )
    db.add(
        PasswordResetToken(
            token=token,
            user_id=user.id,
            expires_at=expires_at,
        )
    )
    db.commit()
    notify_password_reset(user.email, token)


def reset_password(db: Session, token: str, new_password: str) -> None:
    """Consume token and set new password. Raises ValueError if token invalid."""
    record = (
        db.query(PasswordResetToken)
        .filter(
            PasswordResetToken.token == token,
            PasswordResetToken.expires_at > datetime.now(timezone.utc),
        )
        .first()
    )
    if not record:
        raise ValueError("Invalid or expired reset token")
    user = db.query(User).filter(User.id == record.user_id).first()
    if not user:
        raise ValueError("User not found")
    user.password_hash = hash_password(new_password)
    db.delete(record)
    db.commit()
