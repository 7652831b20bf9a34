"""
Turn free-form model replies into script/calendar structures.

The model is asked for JSON but may wrap it in prose or code fences, or not
return JSON at all. Single scripts degrade to a one-row error record carrying
the raw reply; calendars have no meaningful fallback and raise instead.
"""

from __future__ import annotations

import json
import logging
import re
from enum import Enum
from typing import Any, List, Optional, TypedDict, Union

from app.core.exceptions import InvalidCalendarError
from app.schemas.script_content import CalendarEntry, ScriptRow

logger = logging.getLogger(__name__)

FALLBACK_VISUAL = "Error: AI failed to return JSON"

_OBJECT_SPAN = re.compile(r"\{.*\}", re.DOTALL)
_ARRAY_SPAN = re.compile(r"\[.*\]", re.DOTALL)


class ResponseFormat(str, Enum):
    """Expected top-level shape of the model reply."""

    SCRIPT = "script"  # {"title": ..., "script": [{visual, audio}, ...]}
    CONTENT = "content"  # {"title": ..., "content": {visual, audio}}
    CALENDAR = "calendar"  # [{"day": 1, "title": ..., "script"|"content": ...}, ...]

    @property
    def is_calendar(self) -> bool:
        return self is ResponseFormat.CALENDAR


class NormalizedScript(TypedDict):
    title: str
    content: Union[List[ScriptRow], ScriptRow]


def extract_json_span(raw: str, fmt: ResponseFormat) -> str:
    """First '{' .. last '}' (or '[' .. ']' for calendars); raw text when absent."""
    pattern = _ARRAY_SPAN if fmt.is_calendar else _OBJECT_SPAN
    match = pattern.search(raw)
    return match.group(0) if match else raw


def _fallback(raw: str, topic: str) -> NormalizedScript:
    return {"title": topic, "content": [{"visual": FALLBACK_VISUAL, "audio": raw}]}


def normalize_response(
    raw: str,
    fmt: ResponseFormat,
    topic: str,
    days: Optional[int] = None,
) -> Union[NormalizedScript, List[CalendarEntry]]:
    """
    Extract and decode the JSON payload of a model reply.

    Single formats never raise: a reply that does not decode to an object
    yields the fallback record. Calendar replies that do not decode to a list
    raise InvalidCalendarError. Calendar entries are passed through as-is.
    """
    raw = raw or ""
    span = extract_json_span(raw, fmt)
    try:
        data: Any = json.loads(span)
    except ValueError as e:
        logger.warning("Model reply is not valid JSON (%s): %s. Raw text: %r", fmt.value, e, raw)
        if fmt.is_calendar:
            raise InvalidCalendarError("AI did not return a valid content calendar") from e
        return _fallback(raw, topic)

    if fmt.is_calendar:
        if not isinstance(data, list):
            logger.warning("Calendar reply decoded to %s, not a list. Raw text: %r", type(data).__name__, raw)
            raise InvalidCalendarError("AI did not return a valid content calendar")
        if days and len(data) != days:
            logger.info("Calendar reply has %d entries, %d requested", len(data), days)
        return data

    if not isinstance(data, dict):
        logger.warning("Script reply decoded to %s, not an object. Raw text: %r", type(data).__name__, raw)
        return _fallback(raw, topic)
    title = data.get("title")
    if not isinstance(title, str) or not title.strip():
        title = topic
    content = data.get(fmt.value)
    if not isinstance(content, (list, dict)):
        if content is not None:
            logger.warning("Script reply has %s %r, not rows; dropping it", fmt.value, content)
        content = []
    return {"title": title, "content": content}
