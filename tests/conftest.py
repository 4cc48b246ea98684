from __future__ import annotations

from typing import List

import pytest
from fastapi.testclient import TestClient
from langchain_core.language_models import FakeListChatModel
from langchain_core.messages import AIMessage, BaseMessage

from app.main import create_app
from chatbot.agent import RecipeChatClient
from chatbot.core.memory import SessionStore
from chatbot.core.trace import TraceLogger
from config.settings import Settings


class RecordingChatModel:
    """Stands in for the chat model and keeps every prompt it was sent."""

    def __init__(self, content="Here is your recipe."):
        self.content = content
        self.calls: List[List[BaseMessage]] = []

    async def ainvoke(self, messages):
        self.calls.append(list(messages))
        return AIMessage(content=self.content)


class FailingChatModel:
    def __init__(self, exc: Exception):
        self.exc = exc

    async def ainvoke(self, messages):
        raise self.exc


@pytest.fixture
def settings(monkeypatch, tmp_path) -> Settings:
    monkeypatch.setenv("AZURE_OPENAI_API_KEY", "test-key")
    monkeypatch.setenv("AZURE_OPENAI_INSTANCE_NAME", "test-instance")
    monkeypatch.setenv("AZURE_OPENAI_DEPLOYMENT_NAME", "gpt-test")
    monkeypatch.setenv("LOGS_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("AZURE_OPENAI_API_VERSION", raising=False)
    monkeypatch.delenv("PUBLIC_DIR", raising=False)
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.delenv("HOST", raising=False)
    monkeypatch.delenv("APP_ENV", raising=False)
    monkeypatch.delenv("CORS_ORIGINS", raising=False)
    return Settings()


@pytest.fixture
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def tracer(settings) -> TraceLogger:
    return TraceLogger(settings.logs_dir)


@pytest.fixture
def llm():
    return FakeListChatModel(
        responses=[
            "Classic Spaghetti Aglio e Olio\n\nIngredients:\n- 200 g spaghetti",
            "Easy Pancakes\n\nServings: 4",
        ]
    )


@pytest.fixture
def chat_client(llm) -> RecipeChatClient:
    return RecipeChatClient(llm)


@pytest.fixture
def app(settings, store, tracer, chat_client):
    return create_app(settings, store=store, tracer=tracer, client=chat_client)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
