from __future__ import annotations

import logging
from typing import List, Optional

from openai import OpenAI

from app.config import get_settings
from app.core.exceptions import ScriptGenerationError
from app.schemas.script import ScriptOptions
from app.schemas.script_content import CalendarEntry
from app.services.prompt_builder import SYSTEM_PROMPT, build_calendar_prompt, build_script_prompt
from app.services.response_normalizer import NormalizedScript, ResponseFormat, normalize_response

logger = logging.getLogger(__name__)


def get_openai_client() -> OpenAI:
    settings = get_settings()
    client_kwargs = {
        "api_key": settings.openai_api_key,
    }
    if settings.openai_base_url:
        client_kwargs["base_url"] = settings.openai_base_url
    return OpenAI(**client_kwargs)


def generate_text(prompt: str) -> str:
    """Single chat completion; any upstream failure becomes ScriptGenerationError."""
    settings = get_settings()
    if not settings.openai_api_key:
        logger.error("OPENAI_API_KEY is not set; cannot generate scripts")
        raise ScriptGenerationError("Script generation is not configured")
    client = get_openai_client()
    try:
        response = client.chat.completions.create(
            model=settings.openai_model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=settings.openai_temperature,
            max_tokens=settings.openai_max_tokens,
        )
    except Exception as e:
        logger.error("OpenAI API error: %s", e, exc_info=True)
        raise ScriptGenerationError("Failed to generate script with AI") from e

    text = (response.choices[0].message.content or "").strip()
    logger.info("Generated reply (length: %d chars)", len(text))
    return text


def generate_script(
    options: ScriptOptions,
    target_audience: Optional[str] = None,
    fmt: Optional[ResponseFormat] = None,
) -> NormalizedScript:
    fmt = fmt or ResponseFormat(get_settings().script_response_format)
    prompt = build_script_prompt(options, fmt, target_audience=target_audience)
    raw = generate_text(prompt)
    return normalize_response(raw, fmt, topic=options.topic)


def generate_calendar(
    options: ScriptOptions,
    days: int,
    target_audience: Optional[str] = None,
) -> List[CalendarEntry]:
    """Raises InvalidCalendarError when the reply holds no JSON array."""
    prompt = build_calendar_prompt(options, days, target_audience=target_audience)
    raw = generate_text(prompt)
    entries = normalize_response(raw, ResponseFormat.CALENDAR, topic=options.topic, days=days)
    logger.info("Generated %d-day calendar (%d entries)", days, len(entries))
    return entries
