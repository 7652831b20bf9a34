"""Script records: owner-checked CRUD and the save flow used after generation."""

import logging
import uuid
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any, Optional

from sqlalchemy import Uuid, bindparam, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    ScriptAccessDeniedError,
    ScriptNotFoundError,
    ScriptPersistenceError,
)
from app.db.models.script import Script
from app.db.models.user import User
from app.services.notification_service import notify_script_ready

logger = logging.getLogger(__name__)

# Columns every scripts row should carry (database names)
EXPECTED_SCRIPT_COLUMNS = (
    "id",
    "userId",
    "title",
    "content",
    "platform",
    "topic",
    "tone",
    "length",
    "language",
    "framework",
    "calendarDays",
    "createdAt",
    "updatedAt",
)

UPDATABLE_FIELDS = {
    "title",
    "content",
    "platform",
    "topic",
    "tone",
    "length",
    "language",
    "framework",
    "calendar_days",
}


@contextmanager
def _storage_errors(db: Session) -> Iterator[None]:
    """Roll back and re-raise database errors with the driver message unchanged."""
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        message = str(getattr(e, "orig", None) or e)
        logger.error("Script storage failed: %s", message)
        raise ScriptPersistenceError(message) from e


def _commit(db: Session) -> None:
    with _storage_errors(db):
        db.commit()


def create_script(db: Session, owner_id: uuid.UUID, fields: dict[str, Any]) -> Script:
    script = Script(id=uuid.uuid4(), user_id=owner_id, **_clean(fields))
    db.add(script)
    _commit(db)
    with _storage_errors(db):
        db.refresh(script)
    return script


def get_script(db: Session, script_id: uuid.UUID, owner_id: uuid.UUID) -> Script:
    """Fetch by id, then check ownership; a foreign record is never returned."""
    with _storage_errors(db):
        script = db.query(Script).filter(Script.id == script_id).first()
    if not script:
        raise ScriptNotFoundError(str(script_id))
    if script.user_id != owner_id:
        logger.warning("User %s denied access to script %s", owner_id, script_id)
        raise ScriptAccessDeniedError(str(script_id))
    return script


def update_script(
    db: Session,
    script_id: uuid.UUID,
    owner_id: uuid.UUID,
    fields: dict[str, Any],
) -> Script:
    """Apply non-None fields in place. Last write wins."""
    script = get_script(db, script_id, owner_id)
    for key, value in _clean(fields).items():
        if value is not None:
            setattr(script, key, value)
    _commit(db)
    with _storage_errors(db):
        db.refresh(script)
    return script


def delete_script(db: Session, script_id: uuid.UUID, owner_id: uuid.UUID) -> None:
    script = get_script(db, script_id, owner_id)
    db.delete(script)
    _commit(db)


def list_scripts(db: Session, owner_id: uuid.UUID) -> list[Script]:
    """List the owner's scripts, newest first."""
    with _storage_errors(db):
        return (
            db.query(Script)
            .filter(Script.user_id == owner_id)
            .order_by(Script.created_at.desc())
            .all()
        )


def save_new_script(db: Session, user: User, fields: dict[str, Any]) -> Script:
    """Create a record and send the script-ready email without waiting on it."""
    script = create_script(db, user.id, fields)
    logger.info("Saved script %s for user %s", script.id, user.id)
    notify_script_ready(user.email, script.title, script.content)
    return script


def find_missing_columns(row_keys: Iterable[str]) -> list[str]:
    present = set(row_keys)
    return [c for c in EXPECTED_SCRIPT_COLUMNS if c not in present]


def missing_script_columns(db: Session, owner_id: uuid.UUID) -> list[str]:
    """
    Diagnostic only: compare the owner's first raw row against the expected
    column set. No rows means nothing to report. Reads no mapped columns, so
    it still answers when the ORM listing would fail.
    """
    stmt = text('SELECT * FROM scripts WHERE "userId" = :owner LIMIT 1').bindparams(
        bindparam("owner", type_=Uuid(as_uuid=True))
    )
    with _storage_errors(db):
        row = db.execute(stmt, {"owner": owner_id}).mappings().first()
    if row is None:
        return []
    missing = find_missing_columns(row.keys())
    if missing:
        logger.warning("scripts table is missing columns: %s", ", ".join(missing))
    return missing


def _clean(fields: dict[str, Any]) -> dict[str, Any]:
    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown script fields: {', '.join(sorted(unknown))}")
    return dict(fields)


def fields_from_body(
    body: Any,
    exclude: Optional[set[str]] = None,
    partial: bool = False,
) -> dict[str, Any]:
    """Map a camelCase request body onto model attribute names."""
    data = body.model_dump(exclude=exclude, exclude_unset=partial)
    if "calendarDays" in data:
        data["calendar_days"] = data.pop("calendarDays")
    return data
