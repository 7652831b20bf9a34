"""Domain errors for script generation/persistence and their HTTP mappings."""

from typing import Optional
from fastapi import HTTPException

INVALID_CALENDAR = "INVALID_CALENDAR"
GENERATION_FAILED = "GENERATION_FAILED"
ACCESS_DENIED = "ACCESS_DENIED"
NOT_FOUND = "NOT_FOUND"
PERSISTENCE_ERROR = "PERSISTENCE_ERROR"


class ScriptGenerationError(Exception):
    """The generative backend could not produce a reply."""


class InvalidCalendarError(ScriptGenerationError):
    """A calendar reply held no decodable JSON array."""


class ScriptNotFoundError(LookupError):
    pass


class ScriptAccessDeniedError(PermissionError):
    pass


class ScriptPersistenceError(Exception):
    """Database write/read failed; message is the driver's, unchanged."""


def generation_failed_exception(message: Optional[str] = None) -> HTTPException:
    """502: upstream model call failed."""
    return HTTPException(
        status_code=502,
        detail={
            "code": GENERATION_FAILED,
            "message": message or "Failed to generate script with AI.",
        },
    )


def invalid_calendar_exception(days: int, message: Optional[str] = None) -> HTTPException:
    """422: the model reply could not be read as a calendar."""
    return HTTPException(
        status_code=422,
        detail={
            "code": INVALID_CALENDAR,
            "calendarDays": days,
            "message": message or "AI did not return a valid content calendar.",
        },
    )


def access_denied_exception() -> HTTPException:
    return HTTPException(
        status_code=403,
        detail={"code": ACCESS_DENIED, "message": "Access denied"},
    )


def script_not_found_exception() -> HTTPException:
    return HTTPException(
        status_code=404,
        detail={"code": NOT_FOUND, "message": "Script not found"},
    )


def persistence_exception(message: str, missing_columns: Optional[list[str]] = None) -> HTTPException:
    """500 with the storage error passed through verbatim."""
    detail = {"code": PERSISTENCE_ERROR, "message": message}
    if missing_columns:
        detail["missingColumns"] = missing_columns
    return HTTPException(status_code=500, detail=detail)
