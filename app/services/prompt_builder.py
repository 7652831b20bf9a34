"""Prompt text for single-script and content-calendar generation."""

from typing import Optional

from app.schemas.script import ScriptOptions
from app.services.response_normalizer import ResponseFormat

SYSTEM_PROMPT = (
    "You are a professional social media script writer. "
    "You always answer with valid JSON only: no markdown, no code fences, no commentary."
)

FRAMEWORK_CLAUSES = {
    "AIDA": "Structure the script using the AIDA framework (Attention, Interest, Desire, Action).",
    "PAS": "Structure the script using the PAS framework (Problem, Agitate, Solution).",
}

_SCRIPT_SCHEMA = """{
  "title": "Catchy Script Title",
  "script": [
    {
      "visual": "Description of the visual scene",
      "audio": "The voiceover or spoken dialogue"
    }
  ]
}"""

_CONTENT_SCHEMA = """{
  "title": "Catchy Script Title",
  "content": {
    "visual": "All visual directions for the whole piece",
    "audio": "The full voiceover or spoken dialogue"
  }
}"""

_CALENDAR_SCHEMA = """[
  {
    "day": 1,
    "title": "Title for day 1",
    "script": [
      {
        "visual": "Description of the visual scene",
        "audio": "The voiceover or spoken dialogue"
      }
    ]
  }
]"""


def _context_lines(options: ScriptOptions, target_audience: Optional[str]) -> list[str]:
    lines = [
        f"Topic: {options.topic}",
        f"Tone: {options.tone}",
        f"Desired Length: {options.length}",
        f"Language: {options.language}",
    ]
    if target_audience:
        lines.append(f"Target audience: {target_audience}")
    clause = FRAMEWORK_CLAUSES.get(options.framework)
    if clause:
        lines.append(clause)
    return lines


def build_script_prompt(
    options: ScriptOptions,
    fmt: ResponseFormat = ResponseFormat.SCRIPT,
    target_audience: Optional[str] = None,
) -> str:
    if fmt is ResponseFormat.CONTENT:
        shape_rules = [
            'The script has two parts: "visual" (what to see) and "audio" (what to hear/say).',
            "Write the whole piece as one visual/audio pair covering the entire script.",
        ]
        schema = _CONTENT_SCHEMA
    else:
        shape_rules = [
            'The content must be a 2-column script: "visual" (what to see) and "audio" (what to hear/say).',
            "Break the script into short, logical rows. If the topic is long, split it into many rows.",
            "Do NOT return paragraphs. Every idea must belong to a row.",
        ]
        schema = _SCRIPT_SCHEMA

    parts = [
        f"Generate a script for {options.platform} in a structured JSON format.",
        *_context_lines(options, target_audience),
        "",
        "FORMAT RULES:",
        "1. Return ONLY a valid JSON object.",
        '2. No markdown, no "json" backticks, no explanatory text.',
    ]
    parts.extend(f"{i}. {rule}" for i, rule in enumerate(shape_rules, start=3))
    parts.append(f"{len(shape_rules) + 3}. Target the script length to be approximately {options.length}.")
    if options.language and options.language != "English":
        parts.append(f"{len(shape_rules) + 4}. Write all visual and audio text in {options.language}.")
    parts += ["", "JSON SCHEMA:", schema, "", "CRITICAL: Return ONLY the JSON object. No extra text."]
    return "\n".join(parts)


def build_calendar_prompt(
    options: ScriptOptions,
    days: int,
    target_audience: Optional[str] = None,
) -> str:
    parts = [
        f"Create a {days}-day content calendar for {options.platform}.",
        "Each day gets its own short script on a different angle of the topic.",
        *_context_lines(options, target_audience),
        "",
        "FORMAT RULES:",
        f"1. Return ONLY a valid JSON array with exactly {days} entries, one per day, days numbered from 1.",
        '2. No markdown, no "json" backticks, no explanatory text.',
        '3. Each script is a list of rows with "visual" (what to see) and "audio" (what to hear/say).',
        f"4. Each day's script should be approximately {options.length} long.",
        "",
        "JSON SCHEMA:",
        _CALENDAR_SCHEMA,
        "",
        "CRITICAL: Return ONLY the JSON array. No extra text.",
    ]
    return "\n".join(parts)
