"""
Shared fixtures.

The environment is pinned before the application is imported so that
settings never pick up a real database, API key or rate limit.
"""

import os

for _name in ("POSTGRES_URL_NON_POOLING", "POSTGRES_URL", "DATABASE_URL", "PERSISTENCE_ENABLED"):
    os.environ.pop(_name, None)
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["OPENAI_API_KEY"] = ""

from typing import Optional, Sequence  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from chartcoach.domain.coaching.errors import ProviderNotConfiguredError  # noqa: E402
from chartcoach.domain.coaching.ports import LLMPort  # noqa: E402
from chartcoach.infrastructure.coaching.database import initialize_schema  # noqa: E402
from chartcoach.interfaces.coaching.dependencies import (  # noqa: E402
    get_db_engine,
    get_llm,
    get_persistence_enabled,
)
from chartcoach.main import app  # noqa: E402


class FakeLLM(LLMPort):
    """Scripted LLM that records every call."""

    def __init__(self, reply: str = "", configured: bool = True, error: Optional[Exception] = None):
        self.reply = reply
        self.configured = configured
        self.error = error
        self.calls: list[dict] = []

    def is_configured(self) -> bool:
        return self.configured

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float,
        max_tokens: Optional[int] = None,
        images: Sequence[str] = (),
    ) -> str:
        self.calls.append(
            {
                "system": system_prompt,
                "user": user_prompt,
                "temperature": temperature,
                "max_tokens": max_tokens,
                "images": list(images),
            }
        )
        if not self.configured:
            raise ProviderNotConfiguredError()
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def engine():
    """In-memory SQLite engine with the schema created and pairs seeded."""
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    initialize_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def client(engine, fake_llm):
    """API client backed by SQLite and the fake LLM."""
    app.dependency_overrides[get_persistence_enabled] = lambda: True
    app.dependency_overrides[get_db_engine] = lambda: engine
    app.dependency_overrides[get_llm] = lambda: fake_llm
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def fallback_client(fake_llm):
    """API client with persistence disabled."""
    app.dependency_overrides[get_persistence_enabled] = lambda: False
    app.dependency_overrides[get_db_engine] = lambda: None
    app.dependency_overrides[get_llm] = lambda: fake_llm
    yield TestClient(app)
    app.dependency_overrides.clear()
