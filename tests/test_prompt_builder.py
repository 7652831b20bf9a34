from app.schemas.script import ScriptOptions
from app.services.prompt_builder import build_calendar_prompt, build_script_prompt
from app.services.response_normalizer import ResponseFormat


def _options(**overrides):
    data = {"platform": "TikTok", "topic": "home coffee brewing", "tone": "Humorous", "length": "30s"}
    data.update(overrides)
    return ScriptOptions(**data)


def test_script_prompt_carries_form_fields():
    prompt = build_script_prompt(_options())
    assert "Generate a script for TikTok" in prompt
    assert "Topic: home coffee brewing" in prompt
    assert "Tone: Humorous" in prompt
    assert "approximately 30s" in prompt
    assert '"script": [' in prompt


def test_framework_clause_only_when_chosen():
    assert "AIDA" not in build_script_prompt(_options())
    assert "Attention, Interest, Desire, Action" in build_script_prompt(_options(framework="AIDA"))
    assert "Problem, Agitate, Solution" in build_script_prompt(_options(framework="PAS"))


def test_target_audience_is_optional():
    assert "Target audience" not in build_script_prompt(_options())
    prompt = build_script_prompt(_options(), target_audience="new parents")
    assert "Target audience: new parents" in prompt


def test_non_english_language_instruction():
    assert "Write all visual and audio text in" not in build_script_prompt(_options())
    assert "Write all visual and audio text in Tamil." in build_script_prompt(_options(language="Tamil"))


def test_content_format_uses_single_pair_schema():
    prompt = build_script_prompt(_options(), ResponseFormat.CONTENT)
    assert '"content": {' in prompt
    assert '"script": [' not in prompt


def test_calendar_prompt_states_day_count_and_array_shape():
    prompt = build_calendar_prompt(_options(framework="PAS"), days=7)
    assert "7-day content calendar for TikTok" in prompt
    assert "exactly 7 entries" in prompt
    assert "JSON array" in prompt
    assert '"day": 1' in prompt
    assert "Problem, Agitate, Solution" in prompt
