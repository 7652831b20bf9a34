"""SQLAlchemy models - import all for Alembic and relationships."""

from app.db.base import Base
from app.db.models.user import User
from app.db.models.script import Script
from app.db.models.password_reset import PasswordResetToken

__all__ = [
    "Base",
    "User",
    "Script",
    "PasswordResetToken",
]
