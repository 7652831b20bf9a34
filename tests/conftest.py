import os

# Settings are cached on first import; pin the test environment before that.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["SMTP_HOST"] = ""
os.environ["OPENAI_API_KEY"] = "sk-test"
os.environ["SCRIPT_RESPONSE_FORMAT"] = "script"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.models import Base
from app.dependencies import get_db
from app.main import app
from app.services import auth_service, llm_service, script_service


class FakeLLM:
    """Stands in for the chat-completions call; records prompts."""

    def __init__(self):
        self.reply = ""
        self.error = None
        self.prompts = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def fake_llm(monkeypatch):
    fake = FakeLLM()
    monkeypatch.setattr(llm_service, "generate_text", fake)
    return fake


@pytest.fixture
def notifications(monkeypatch):
    """Capture detached notifications instead of dispatching them."""
    sent = []
    monkeypatch.setattr(auth_service, "notify_welcome", lambda *a: sent.append(("welcome", *a)) or True)
    monkeypatch.setattr(
        auth_service, "notify_password_reset", lambda *a: sent.append(("password_reset", *a)) or True
    )
    monkeypatch.setattr(
        script_service, "notify_script_ready", lambda *a: sent.append(("script_ready", *a)) or True
    )
    return sent


@pytest.fixture
def register(client):
    def _register(email: str = "ada@example.com", password: str = "correct-horse", name: str = "Ada"):
        r = client.post(
            "/api/v1/auth/register",
            json={"email": email, "password": password, "fullName": name},
        )
        assert r.status_code == 200, r.text
        token = r.json()["tokens"]["accessToken"]
        return {"Authorization": f"Bearer {token}"}

    return _register
