"""Shared pytest fixtures: an app on in-memory SQLite with a scripted completion client."""

from __future__ import annotations

import pytest

from app import create_app
from domain.models import db

TEST_CONFIG = {
    "ENV": "testing",
    "TESTING": True,
    "SECRET_KEY": "test-secret-key",
    "SQLALCHEMY_DATABASE_URI": "sqlite://",
    "SQLALCHEMY_ENGINE_OPTIONS": {},
    "AUTO_CREATE_TABLES": True,
    "RATELIMIT_ENABLED": False,
    "RATELIMIT_STORAGE_URI": "memory://",
    "ANON_LEDGER_BACKEND": "memory",
    "PROVIDER_DEFAULT": "openai",
    "OPENAI_API_KEY": "sk-test",
    "DEBUG_ENDPOINTS_ENABLED": True,
    "LOG_LEVEL": "WARNING",
}

GOOD_DRAFTS = '{"drafts": ["Draft one.", "Draft two.", "Draft three."]}'


class FakeCompletionClient:
    provider = "fake"

    def __init__(self, reply: str = GOOD_DRAFTS, error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def app():
    app = create_app(dict(TEST_CONFIG))
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def completion(app):
    fake = FakeCompletionClient()
    app.completion_client_factory = lambda config, provider=None: fake
    return fake


@pytest.fixture
def client(app, completion):
    return app.test_client()


def login(client, user_id: str = "user-1", email: str = "user-1@example.com") -> None:
    """Simulates the auth provider's sign-in flow setting the signed session."""
    with client.session_transaction() as sess:
        sess["user"] = {"user_id": user_id, "email": email}


def generate(client, message: str = "My order #1234 arrived damaged, what can I do?", tone: str = "Friendly", **extra):
    payload = {"message": message, "tone": tone, **extra}
    return client.post("/api/generate", json=payload)
