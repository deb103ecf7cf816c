"""Shared fixtures: an isolated app per test and a scripted stand-in for Gemini."""
from __future__ import annotations

import json
from typing import Callable, Union

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from app.services.llm import Conversation, LLMProvider

_ENV_VARS = (
    "GEMINI_API_KEY",
    "GEMINI_MODEL",
    "GEMINI_BASE_URL",
    "GEMINI_TIMEOUT_SECONDS",
    "SESSION_TTL_SECONDS",
    "SESSION_CLEANUP_INTERVAL_SECONDS",
    "CORS_ORIGINS",
    "ENABLE_TEST_HARNESS",
)

Reply = Union[str, Exception, Callable[[str], str]]


def summary_json(**overrides) -> str:
    body = {
        "initial_bullet_summary": ["Budget approved", "Launch moved to May", "Hiring paused"],
        "user_customized_summary": "The team approved the Q3 budget and moved the launch.",
        "clarifications_or_notes": [],
    }
    body.update(overrides)
    return json.dumps(body)


class FakeConversation(Conversation):
    def __init__(self, provider: "FakeProvider", system_instruction: str | None) -> None:
        self.provider = provider
        self.system_instruction = system_instruction
        self.sent: list[str] = []

    def send_message(self, text: str) -> str:
        self.sent.append(text)
        reply = self.provider.replies.pop(0) if self.provider.replies else summary_json()
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(text)
        return reply


class FakeProvider(LLMProvider):
    """Replays queued replies; an Exception in the queue is raised instead."""

    def __init__(self, *replies: Reply) -> None:
        self.replies: list[Reply] = list(replies)
        self.chats: list[FakeConversation] = []
        self.generated: list[str] = []

    def queue(self, *replies: Reply) -> None:
        self.replies.extend(replies)

    def start_chat(self, system_instruction: str | None = None) -> FakeConversation:
        chat = FakeConversation(self, system_instruction)
        self.chats.append(chat)
        return chat

    def generate(self, prompt: str) -> str:
        self.generated.append(prompt)
        reply = self.replies.pop(0) if self.replies else '{"message": "hello"}'
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def make_app(tmp_path, monkeypatch):
    """Build a fresh app rooted in tmp_path; keyword args become env vars."""
    monkeypatch.chdir(tmp_path)
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SESSION_CLEANUP_INTERVAL_SECONDS", "0")

    def _make(**env: str):
        for name, value in env.items():
            monkeypatch.setenv(name, value)
        return create_app()

    return _make


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def app(make_app, provider, monkeypatch):
    application = make_app(GEMINI_API_KEY="test-key")
    monkeypatch.setattr(application.state.summary_service, "_provider_factory", lambda: provider)
    return application


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
