from __future__ import annotations

import json
import logging
from typing import Any, List, Literal, TypedDict, Union

logger = logging.getLogger(__name__)

LEGACY_VISUAL = "Legacy Content"

ContentKind = Literal["script", "calendar", "legacy"]


class ScriptRow(TypedDict):
    visual: str
    audio: str


class CalendarEntry(TypedDict, total=False):
    day: int
    title: str
    script: List[ScriptRow]
    content: ScriptRow


# What generation hands to storage: rows, one collapsed pair, or calendar days
GeneratedContent = Union[List[ScriptRow], ScriptRow, List[CalendarEntry]]


class DecodedContent(TypedDict):
    kind: ContentKind
    items: List[Any]


def _is_calendar(items: List[Any]) -> bool:
    return bool(items) and isinstance(items[0], dict) and "day" in items[0]


def decode_stored_content(value: Any, calendar_days: int = 0) -> DecodedContent:
    """
    Resolve stored content into one tagged variant.

    Strings are JSON text written by older clients; if they do not decode they
    become a single "Legacy Content" row carrying the raw text.
    """
    if value is None:
        return {"kind": "script", "items": []}
    text = value if isinstance(value, str) else None
    if text is not None:
        try:
            value = json.loads(text)
        except ValueError:
            logger.info("Stored content is not JSON; serving as legacy text")
            return {"kind": "legacy", "items": [{"visual": LEGACY_VISUAL, "audio": text}]}
    if isinstance(value, dict):
        # Collapsed single {visual, audio} pair
        return {"kind": "script", "items": [value]}
    if not isinstance(value, list):
        # JSON scalar
        audio = text if text is not None else json.dumps(value)
        return {"kind": "legacy", "items": [{"visual": LEGACY_VISUAL, "audio": audio}]}
    if (calendar_days or 0) > 0 or _is_calendar(value):
        return {"kind": "calendar", "items": value}
    return {"kind": "script", "items": value}


def content_kind(content: Any, calendar_days: int = 0) -> ContentKind:
    """Kind of freshly generated (already decoded) content."""
    if (calendar_days or 0) > 0:
        return "calendar"
    if isinstance(content, list) and _is_calendar(content):
        return "calendar"
    return "script"
