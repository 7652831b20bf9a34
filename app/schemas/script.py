"""Script generation and CRUD schemas (camelCase for FE contract)."""

from datetime import datetime
from typing import Any, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.config import get_settings

Framework = Literal["None", "AIDA", "PAS"]


def _within_calendar_limit(days):
    limit = get_settings().calendar_max_days
    if days is not None and days > limit:
        raise ValueError(f"calendarDays must be at most {limit}")
    return days


class ScriptOptions(BaseModel):
    """Form fields shared by generation and storage."""

    platform: str = "YouTube"  # YouTube, LinkedIn, TikTok, Shorts
    topic: str = Field(..., min_length=1)
    tone: str = "Professional"
    length: str = "60s"
    language: str = "English"
    framework: Framework = "None"
    calendarDays: int = Field(0, ge=0)

    @field_validator("topic")
    @classmethod
    def strip_topic(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("topic must not be blank")
        return v

    @field_validator("calendarDays")
    @classmethod
    def days_within_limit(cls, v: int) -> int:
        return _within_calendar_limit(v)


class GenerateScriptRequest(ScriptOptions):
    targetAudience: Optional[str] = None
    save: bool = False  # persist the result when generation succeeds


class GenerateScriptResponse(BaseModel):
    id: Optional[UUID] = None  # set when save=true
    title: str
    kind: str
    content: Any


class ScriptCreateBody(ScriptOptions):
    title: str = Field(..., min_length=1)
    content: Any

    @field_validator("content")
    @classmethod
    def content_present(cls, v: Any) -> Any:
        if v is None or (isinstance(v, (list, str)) and len(v) == 0):
            raise ValueError("content must not be empty")
        return v


class ScriptUpdateBody(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    title: Optional[str] = None
    content: Optional[Any] = None
    platform: Optional[str] = None
    topic: Optional[str] = None
    tone: Optional[str] = None
    length: Optional[str] = None
    language: Optional[str] = None
    framework: Optional[Framework] = None
    calendarDays: Optional[int] = Field(None, ge=0)

    @field_validator("calendarDays")
    @classmethod
    def days_within_limit(cls, v: Optional[int]) -> Optional[int]:
        return _within_calendar_limit(v)


class ScriptResponse(BaseModel):
    id: UUID
    title: str
    kind: str  # script, calendar, legacy
    content: list
    platform: str
    topic: str
    tone: str
    length: Optional[str] = None
    language: Optional[str] = None
    framework: Optional[str] = None
    calendarDays: int = 0
    createdAt: datetime
    updatedAt: datetime


class ScriptListResponse(BaseModel):
    scripts: list[ScriptResponse]
    missingColumns: list[str] = []
