"""
Tests for settings, startup wiring and the WSGI entry point.

Settings are built with ``_env_file=None`` so a local .env never leaks in.
"""

import json
from unittest.mock import patch
from wsgiref.util import setup_testing_defaults

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from sqlalchemy.exc import OperationalError

from chartcoach.core.config import Settings
from chartcoach.main import app
from chartcoach.shared.security.rate_limiting import rate_limit_exceeded_handler

_DATABASE_VARS = ("POSTGRES_URL_NON_POOLING", "POSTGRES_URL", "DATABASE_URL", "PERSISTENCE_ENABLED")


@pytest.fixture
def env(monkeypatch):
    """Environment with every database variable cleared."""
    for name in _DATABASE_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


# ══════════════════════════════════════════════════════════════════════
# Settings
# ══════════════════════════════════════════════════════════════════════


class TestDatabaseSettings:
    """Tests for connection-string resolution and the persistence switch."""

    def test_no_connection_string(self, env) -> None:
        settings = Settings(_env_file=None)

        assert settings.get_database_url() is None
        assert settings.is_persistence_enabled() is False

    def test_non_pooling_url_wins(self, env) -> None:
        env.setenv("DATABASE_URL", "postgresql://u@h/db3")
        env.setenv("POSTGRES_URL", "postgresql://u@h/db2")
        env.setenv("POSTGRES_URL_NON_POOLING", "postgresql://u@h/db1")

        assert Settings(_env_file=None).get_database_url() == "postgresql://u@h/db1"

    def test_postgres_url_before_database_url(self, env) -> None:
        env.setenv("DATABASE_URL", "postgresql://u@h/db3")
        env.setenv("POSTGRES_URL", "postgresql://u@h/db2")

        assert Settings(_env_file=None).get_database_url() == "postgresql://u@h/db2"

    def test_database_url_alone(self, env) -> None:
        env.setenv("DATABASE_URL", "postgresql://u@h/db3")

        settings = Settings(_env_file=None)

        assert settings.get_database_url() == "postgresql://u@h/db3"
        assert settings.is_persistence_enabled() is True

    def test_postgres_scheme_rewritten(self, env) -> None:
        env.setenv("POSTGRES_URL", "postgres://u:p@h:5432/db")

        assert Settings(_env_file=None).get_database_url() == "postgresql://u:p@h:5432/db"

    def test_blank_url_counts_as_unset(self, env) -> None:
        env.setenv("DATABASE_URL", "   ")

        assert Settings(_env_file=None).get_database_url() is None

    def test_switch_off_overrides_connection_string(self, env) -> None:
        env.setenv("DATABASE_URL", "postgresql://u@h/db")
        env.setenv("PERSISTENCE_ENABLED", "false")

        assert Settings(_env_file=None).is_persistence_enabled() is False

    def test_switch_on_without_connection_string(self, env) -> None:
        """Persistence cannot be forced on without a database to talk to."""
        env.setenv("PERSISTENCE_ENABLED", "true")

        assert Settings(_env_file=None).is_persistence_enabled() is False

    def test_switch_on_with_connection_string(self, env) -> None:
        env.setenv("DATABASE_URL", "postgresql://u@h/db")
        env.setenv("PERSISTENCE_ENABLED", "true")

        assert Settings(_env_file=None).is_persistence_enabled() is True


# ══════════════════════════════════════════════════════════════════════
# Rate limiting
# ══════════════════════════════════════════════════════════════════════


def _limited_app() -> FastAPI:
    """Tiny app with an enabled limiter and the shared 429 handler."""
    limiter = Limiter(key_func=get_remote_address)
    limited = FastAPI()
    limited.state.limiter = limiter
    limited.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    @limited.get("/ping")
    @limiter.limit("1/minute")
    def ping(request: Request) -> dict:
        return {"ok": True}

    return limited


class TestRateLimitHandler:
    def test_second_call_gets_429_error_body(self) -> None:
        client = TestClient(_limited_app())

        assert client.get("/ping").status_code == 200
        response = client.get("/ping")

        assert response.status_code == 429
        assert response.json()["error"] == "Rate limit exceeded"


# ══════════════════════════════════════════════════════════════════════
# Startup
# ══════════════════════════════════════════════════════════════════════


class TestLifespan:
    """Tests for schema creation when the application starts."""

    @patch("chartcoach.main.initialize_schema")
    @patch("chartcoach.main.get_engine")
    @patch("chartcoach.main.settings")
    def test_startup_creates_schema(self, settings, get_engine, initialize_schema) -> None:
        settings.is_persistence_enabled.return_value = True
        settings.get_database_url.return_value = "postgresql://u@h/db"

        with TestClient(app):
            pass

        get_engine.assert_called_once_with("postgresql://u@h/db")
        initialize_schema.assert_called_once_with(get_engine.return_value)

    @patch("chartcoach.main.initialize_schema")
    @patch("chartcoach.main.settings")
    def test_fallback_mode_skips_schema(self, settings, initialize_schema) -> None:
        settings.is_persistence_enabled.return_value = False

        with TestClient(app):
            pass

        initialize_schema.assert_not_called()

    @patch("chartcoach.main.initialize_schema")
    @patch("chartcoach.main.get_engine")
    @patch("chartcoach.main.settings")
    def test_unreachable_database_does_not_block_startup(
        self, settings, get_engine, initialize_schema
    ) -> None:
        settings.is_persistence_enabled.return_value = True
        settings.get_database_url.return_value = "postgresql://u@h/db"
        initialize_schema.side_effect = OperationalError("SELECT 1", {}, Exception("down"))

        with TestClient(app) as client:
            response = client.get("/api/health")

        assert response.status_code == 200


# ══════════════════════════════════════════════════════════════════════
# WSGI
# ══════════════════════════════════════════════════════════════════════


class TestWsgiApplication:
    def test_serves_health_over_wsgi(self) -> None:
        from chartcoach.wsgi import application

        environ = {"REQUEST_METHOD": "GET", "PATH_INFO": "/api/health", "QUERY_STRING": ""}
        setup_testing_defaults(environ)
        captured = {}

        def start_response(status, headers, exc_info=None):
            captured["status"] = status
            captured["headers"] = dict(headers)

        body = b"".join(application(environ, start_response))

        assert captured["status"].startswith("200")
        assert json.loads(body)["status"] == "ok"
        assert captured["headers"]["x-content-type-options"] == "nosniff"
