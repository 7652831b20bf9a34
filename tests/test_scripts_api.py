import json
import uuid

from sqlalchemy import text

from app.config import get_settings
from app.core.exceptions import ScriptGenerationError
from app.db.models.script import Script
from app.services.response_normalizer import FALLBACK_VISUAL

BREW_REPLY = (
    "Here you go:\n```json\n"
    '{"title":"Brew Better","script":[{"visual":"kettle","audio":"Let\'s talk coffee."}]}'
    "\n```"
)

FORM = {
    "platform": "YouTube",
    "topic": "home coffee brewing",
    "tone": "Educational",
    "length": "60s",
    "language": "English",
    "framework": "None",
}


def _create(client, headers, **overrides):
    body = {
        **FORM,
        "title": "Brew Better",
        "content": [{"visual": "kettle", "audio": "Let's talk coffee."}],
    }
    body.update(overrides)
    r = client.post("/api/v1/scripts", json=body, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def _user_id(client, headers) -> uuid.UUID:
    return uuid.UUID(client.get("/api/v1/me", headers=headers).json()["user"]["id"])


def test_requires_authentication(client):
    assert client.get("/api/v1/scripts").status_code == 401
    assert client.post("/api/v1/scripts/generate", json=FORM).status_code == 401


def test_generate_single_script_without_saving(client, register, fake_llm, notifications):
    headers = register()
    fake_llm.reply = BREW_REPLY
    r = client.post("/api/v1/scripts/generate", json=FORM, headers=headers)
    assert r.status_code == 200
    assert r.json() == {
        "id": None,
        "title": "Brew Better",
        "kind": "script",
        "content": [{"visual": "kettle", "audio": "Let's talk coffee."}],
    }
    assert "Topic: home coffee brewing" in fake_llm.prompts[0]
    assert client.get("/api/v1/scripts", headers=headers).json()["scripts"] == []
    assert [n for n in notifications if n[0] == "script_ready"] == []


def test_generate_and_save_persists_and_notifies(client, register, fake_llm, notifications):
    headers = register()
    fake_llm.reply = BREW_REPLY
    r = client.post("/api/v1/scripts/generate", json={**FORM, "save": True}, headers=headers)
    assert r.status_code == 200
    script_id = r.json()["id"]
    assert script_id

    stored = client.get(f"/api/v1/scripts/{script_id}", headers=headers).json()
    assert stored["title"] == "Brew Better"
    assert stored["kind"] == "script"
    assert stored["topic"] == "home coffee brewing"
    assert stored["calendarDays"] == 0

    ready = [n for n in notifications if n[0] == "script_ready"]
    assert ready == [("script_ready", "ada@example.com", "Brew Better", stored["content"])]


def test_non_json_reply_yields_fallback_script(client, register, fake_llm):
    headers = register()
    fake_llm.reply = "I'd love to write that for you, but here is prose instead."
    r = client.post("/api/v1/scripts/generate", json=FORM, headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["title"] == "home coffee brewing"
    assert body["content"] == [{"visual": FALLBACK_VISUAL, "audio": fake_llm.reply}]


def test_generate_calendar(client, register, fake_llm):
    headers = register()
    fake_llm.reply = json.dumps(
        [
            {"day": 1, "title": "Beans", "script": [{"visual": "bag", "audio": "Fresh beans."}]},
            {"day": 2, "title": "Grind", "script": [{"visual": "grinder", "audio": "Burr it."}]},
        ]
    )
    r = client.post("/api/v1/scripts/generate", json={**FORM, "calendarDays": 2, "save": True}, headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["kind"] == "calendar"
    assert body["title"] == "2-Day Content Calendar: home coffee brewing"
    assert "2-day content calendar" in fake_llm.prompts[0]

    stored = client.get(f"/api/v1/scripts/{body['id']}", headers=headers).json()
    assert stored["kind"] == "calendar"
    assert stored["calendarDays"] == 2
    assert [e["day"] for e in stored["content"]] == [1, 2]


def test_calendar_prose_reply_fails_and_persists_nothing(client, register, fake_llm, notifications):
    headers = register()
    fake_llm.reply = "Day 1 talk about beans, day 2 grinders, day 3 water temperature."
    r = client.post("/api/v1/scripts/generate", json={**FORM, "calendarDays": 3, "save": True}, headers=headers)
    assert r.status_code == 422
    assert r.json()["detail"]["code"] == "INVALID_CALENDAR"
    assert r.json()["detail"]["calendarDays"] == 3
    assert client.get("/api/v1/scripts", headers=headers).json()["scripts"] == []
    assert [n for n in notifications if n[0] == "script_ready"] == []


def test_upstream_failure_is_generic_502(client, register, fake_llm):
    headers = register()
    fake_llm.error = ScriptGenerationError("Failed to generate script with AI")
    r = client.post("/api/v1/scripts/generate", json=FORM, headers=headers)
    assert r.status_code == 502
    assert r.json()["detail"]["code"] == "GENERATION_FAILED"


def test_generate_rejects_blank_topic_and_day_range(client, register, fake_llm):
    headers = register()
    assert client.post("/api/v1/scripts/generate", json={**FORM, "topic": "  "}, headers=headers).status_code == 422
    assert client.post("/api/v1/scripts/generate", json={**FORM, "calendarDays": 31}, headers=headers).status_code == 422
    assert fake_llm.prompts == []


def test_crud_round_trip(client, register, notifications):
    headers = register()
    created = _create(client, headers)
    assert created["kind"] == "script"
    assert [n[0] for n in notifications].count("script_ready") == 1

    r = client.patch(
        f"/api/v1/scripts/{created['id']}",
        json={"title": "Brew Best", "content": [{"visual": "french press", "audio": "Four minutes."}]},
        headers=headers,
    )
    assert r.status_code == 200
    updated = r.json()
    assert updated["id"] == created["id"]
    assert updated["title"] == "Brew Best"
    assert updated["tone"] == "Educational"
    assert updated["content"] == [{"visual": "french press", "audio": "Four minutes."}]
    # Updates do not re-send the script-ready email
    assert [n[0] for n in notifications].count("script_ready") == 1

    assert client.delete(f"/api/v1/scripts/{created['id']}", headers=headers).json() == {"success": True}
    assert client.get(f"/api/v1/scripts/{created['id']}", headers=headers).status_code == 404


def test_create_rejects_empty_content(client, register):
    headers = register()
    r = client.post("/api/v1/scripts", json={**FORM, "title": "Empty", "content": []}, headers=headers)
    assert r.status_code == 422


def test_list_is_owner_scoped_and_newest_first(client, register):
    ada = register()
    bob = register(email="bob@example.com", name="Bob")
    first = _create(client, ada, title="First")
    second = _create(client, ada, title="Second")
    _create(client, bob, title="Bob's")

    body = client.get("/api/v1/scripts", headers=ada).json()
    assert [s["id"] for s in body["scripts"]] == [second["id"], first["id"]]
    assert body["missingColumns"] == []


def test_non_owner_gets_access_denied(client, register):
    ada = register()
    bob = register(email="bob@example.com", name="Bob")
    script = _create(client, ada)
    url = f"/api/v1/scripts/{script['id']}"

    for r in (
        client.get(url, headers=bob),
        client.patch(url, json={"title": "Stolen"}, headers=bob),
        client.delete(url, headers=bob),
        client.get(f"{url}/text", headers=bob),
    ):
        assert r.status_code == 403
        assert r.json()["detail"]["code"] == "ACCESS_DENIED"
        assert "Brew Better" not in r.text

    assert client.get(url, headers=ada).json()["title"] == "Brew Better"


def test_unknown_id_is_not_found(client, register):
    headers = register()
    r = client.get(f"/api/v1/scripts/{uuid.uuid4()}", headers=headers)
    assert r.status_code == 404
    assert r.json()["detail"]["code"] == "NOT_FOUND"


def test_legacy_string_content_is_served_as_placeholder_row(client, register, session_factory):
    headers = register()
    owner = _user_id(client, headers)
    with session_factory() as db:
        legacy = Script(
            user_id=owner,
            title="Old script",
            content="VISUAL: kettle. AUDIO: let's talk coffee.",
            platform="YouTube",
            topic="coffee",
            tone="Professional",
        )
        serialized = Script(
            user_id=owner,
            title="Serialized",
            content=json.dumps([{"visual": "mug", "audio": "Cheers."}]),
            platform="YouTube",
            topic="coffee",
            tone="Professional",
        )
        db.add_all([legacy, serialized])
        db.commit()
        legacy_id, serialized_id = legacy.id, serialized.id

    r = client.get(f"/api/v1/scripts/{legacy_id}", headers=headers)
    assert r.status_code == 200
    assert r.json()["kind"] == "legacy"
    assert r.json()["content"] == [
        {"visual": "Legacy Content", "audio": "VISUAL: kettle. AUDIO: let's talk coffee."}
    ]

    r = client.get(f"/api/v1/scripts/{serialized_id}", headers=headers)
    assert r.json()["kind"] == "script"
    assert r.json()["content"] == [{"visual": "mug", "audio": "Cheers."}]


def test_text_export(client, register):
    headers = register()
    script = _create(
        client,
        headers,
        content=[{"visual": "kettle", "audio": "Hi."}, {"visual": "mug", "audio": "Bye."}],
    )
    r = client.get(f"/api/v1/scripts/{script['id']}/text", headers=headers)
    assert r.json()["text"] == "[VISUAL]: kettle\n[AUDIO]: Hi.\n\n[VISUAL]: mug\n[AUDIO]: Bye."

    calendar = _create(client, headers, calendarDays=1, content=[{"day": 1, "title": "Beans", "script": []}])
    assert client.get(f"/api/v1/scripts/{calendar['id']}/text", headers=headers).status_code == 400


def test_generate_with_numeric_title_uses_topic(client, register, fake_llm):
    headers = register()
    fake_llm.reply = json.dumps({"title": 2024, "script": [{"visual": "kettle", "audio": "Hi."}]})
    r = client.post("/api/v1/scripts/generate", json=FORM, headers=headers)
    assert r.status_code == 200
    assert r.json()["title"] == "home coffee brewing"
    assert r.json()["content"] == [{"visual": "kettle", "audio": "Hi."}]


def test_calendar_limit_comes_from_settings(client, register, fake_llm, monkeypatch):
    headers = register()
    monkeypatch.setattr(get_settings(), "calendar_max_days", 3)
    r = client.post("/api/v1/scripts/generate", json={**FORM, "calendarDays": 4}, headers=headers)
    assert r.status_code == 422
    assert "at most 3" in r.text
    assert fake_llm.prompts == []

    created = _create(client, headers)
    r = client.patch(f"/api/v1/scripts/{created['id']}", json={"calendarDays": 4}, headers=headers)
    assert r.status_code == 422


def test_absent_column_is_reported_with_driver_message(client, register, engine):
    headers = register()
    script = _create(client, headers)
    with engine.begin() as conn:
        conn.execute(text('ALTER TABLE scripts DROP COLUMN "framework"'))

    r = client.get("/api/v1/scripts", headers=headers)
    assert r.status_code == 500
    detail = r.json()["detail"]
    assert detail["code"] == "PERSISTENCE_ERROR"
    assert "no such column" in detail["message"]
    assert "framework" in detail["message"]
    assert detail["missingColumns"] == ["framework"]

    r = client.get(f"/api/v1/scripts/{script['id']}", headers=headers)
    assert r.status_code == 500
    assert "framework" in r.json()["detail"]["message"]
