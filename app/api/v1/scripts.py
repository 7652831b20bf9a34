"""Script generation, dashboard listing and editor CRUD."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from app.core.exceptions import (
    InvalidCalendarError,
    ScriptAccessDeniedError,
    ScriptGenerationError,
    ScriptNotFoundError,
    ScriptPersistenceError,
    access_denied_exception,
    generation_failed_exception,
    invalid_calendar_exception,
    persistence_exception,
    script_not_found_exception,
)
from app.db.models.script import Script
from app.dependencies import CurrentUser, DbSession
from app.schemas.script import (
    GenerateScriptRequest,
    GenerateScriptResponse,
    ScriptCreateBody,
    ScriptListResponse,
    ScriptResponse,
    ScriptUpdateBody,
)
from app.schemas.script_content import decode_stored_content
from app.services.generation_service import run_script_generation
from app.services.script_service import (
    delete_script,
    fields_from_body,
    get_script,
    list_scripts,
    missing_script_columns,
    save_new_script,
    update_script,
)

router = APIRouter(prefix="/scripts", tags=["scripts"])


def _script_response(script: Script) -> ScriptResponse:
    decoded = decode_stored_content(script.content, script.calendar_days)
    return ScriptResponse(
        id=script.id,
        title=script.title,
        kind=decoded["kind"],
        content=decoded["items"],
        platform=script.platform,
        topic=script.topic,
        tone=script.tone,
        length=script.length,
        language=script.language,
        framework=script.framework,
        calendarDays=script.calendar_days or 0,
        createdAt=script.created_at,
        updatedAt=script.updated_at,
    )


def _require_script(db: DbSession, script_id: UUID, owner_id: UUID) -> Script:
    try:
        return get_script(db, script_id, owner_id)
    except ScriptNotFoundError:
        raise script_not_found_exception()
    except ScriptAccessDeniedError:
        raise access_denied_exception()
    except ScriptPersistenceError as e:
        raise persistence_exception(str(e))


@router.post("/generate", response_model=GenerateScriptResponse)
def generate(
    body: GenerateScriptRequest,
    db: DbSession,
    user: CurrentUser,
):
    """
    Generate a script (calendarDays=0) or an N-day calendar.
    With save=true the result is stored and the script-ready email is queued.
    """
    try:
        result = run_script_generation(db, user, body)
    except InvalidCalendarError as e:
        raise invalid_calendar_exception(body.calendarDays, str(e))
    except ScriptGenerationError as e:
        raise generation_failed_exception(str(e))
    except ScriptPersistenceError as e:
        raise persistence_exception(str(e))
    return GenerateScriptResponse(**result)


@router.get("", response_model=ScriptListResponse)
def scripts_list(
    db: DbSession,
    user: CurrentUser,
):
    """
    Dashboard listing, newest first. missingColumns is a schema warning for display only.
    The raw column check runs first so a listing that fails on an absent
    column still reports which ones are missing.
    """
    try:
        missing = missing_script_columns(db, user.id)
    except ScriptPersistenceError as e:
        raise persistence_exception(str(e))
    try:
        scripts = list_scripts(db, user.id)
    except ScriptPersistenceError as e:
        raise persistence_exception(str(e), missing_columns=missing)
    return ScriptListResponse(
        scripts=[_script_response(s) for s in scripts],
        missingColumns=missing,
    )


@router.post("", response_model=ScriptResponse, status_code=status.HTTP_201_CREATED)
def scripts_create(
    body: ScriptCreateBody,
    db: DbSession,
    user: CurrentUser,
):
    try:
        script = save_new_script(db, user, fields_from_body(body))
    except ScriptPersistenceError as e:
        raise persistence_exception(str(e))
    return _script_response(script)


@router.get("/{id}", response_model=ScriptResponse)
def scripts_get(
    id: UUID,
    db: DbSession,
    user: CurrentUser,
):
    return _script_response(_require_script(db, id, user.id))


@router.patch("/{id}", response_model=ScriptResponse)
def scripts_update(
    id: UUID,
    body: ScriptUpdateBody,
    db: DbSession,
    user: CurrentUser,
):
    _require_script(db, id, user.id)
    try:
        script = update_script(db, id, user.id, fields_from_body(body, partial=True))
    except ScriptPersistenceError as e:
        raise persistence_exception(str(e))
    return _script_response(script)


@router.delete("/{id}")
def scripts_delete(
    id: UUID,
    db: DbSession,
    user: CurrentUser,
):
    _require_script(db, id, user.id)
    try:
        delete_script(db, id, user.id)
    except ScriptPersistenceError as e:
        raise persistence_exception(str(e))
    return {"success": True}


@router.get("/{id}/text")
def scripts_text(
    id: UUID,
    db: DbSession,
    user: CurrentUser,
):
    """Copy-to-clipboard text: [VISUAL]/[AUDIO] blocks per row."""
    script = _require_script(db, id, user.id)
    decoded = decode_stored_content(script.content, script.calendar_days)
    if decoded["kind"] == "calendar":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Plain-text export is only available for single scripts",
        )
    text = "\n\n".join(
        f"[VISUAL]: {row.get('visual', '')}\n[AUDIO]: {row.get('audio', '')}"
        for row in decoded["items"]
        if isinstance(row, dict)
    )
    return {"title": script.title, "text": text}
