"""
Tests for the coaching API endpoints.

Uses FastAPI TestClient against SQLite and a scripted LLM.
Tests the full request/response cycle including validation and error mapping.
"""

from unittest.mock import patch

from chartcoach.domain.coaching.errors import LLMProviderError

ENTRY_MODEL = {
    "name": "London Sweep",
    "style": "Intraday",
    "timeframe": "M15",
    "riskPerTrade": 0.5,
    "checklist": ["HTF bias", "Sweep"],
    "tags": ["ICT"],
}


def _save(client, pair: str = "EURUSD", **extra):
    body = {"pair": pair, "timeframes": ["H4", "M15"], "analysis": {"overview": "Bullish"}}
    body.update(extra)
    return client.post("/api/analyze-charts", json=body)


# ══════════════════════════════════════════════════════════════════════
# Chart analyses
# ══════════════════════════════════════════════════════════════════════


class TestAnalyzeChartsEndpoint:
    """Tests for GET/POST /api/analyze-charts."""

    def test_get_without_pair_returns_400(self, client) -> None:
        response = client.get("/api/analyze-charts")
        assert response.status_code == 400
        assert response.json() == {"error": "pair is required"}

    def test_incomplete_save_is_a_noop(self, client) -> None:
        response = client.post("/api/analyze-charts", json={"pair": "EURUSD"})

        assert response.status_code == 200
        assert response.json() == {"ok": True, "source": "noop"}

    def test_missing_or_non_object_body_is_a_noop(self, client) -> None:
        assert client.post("/api/analyze-charts").json() == {"ok": True, "source": "noop"}
        assert client.post("/api/analyze-charts", json=[1, 2]).json() == {
            "ok": True,
            "source": "noop",
        }

    def test_wrongly_typed_fields_are_dropped(self, client) -> None:
        """Bad values never turn into a 400."""
        bad_pair = client.post(
            "/api/analyze-charts", json={"pair": 123, "analysis": {"overview": "x"}}
        )
        bad_analysis = client.post(
            "/api/analyze-charts", json={"pair": "EURUSD", "analysis": "Bullish"}
        )
        assert bad_pair.status_code == 200
        assert bad_pair.json() == {"ok": True, "source": "noop"}
        assert bad_analysis.json() == {"ok": True, "source": "noop"}

        saved = _save(client, timeframes="H4", notes=7, checklistState=[{"text": "Bias"}, "x"])
        assert saved.json()["source"] == "db"

        entry = client.get("/api/analyze-charts", params={"pair": "EURUSD"}).json()["entry"]
        assert entry["timeframes"] == []
        assert entry["notes"] == ""
        assert entry["checklistState"] == [{"text": "Bias"}]

    def test_empty_analysis_is_stored(self, client) -> None:
        saved = _save(client, analysis={}).json()

        assert saved["source"] == "db"
        entry = client.get("/api/analyze-charts", params={"pair": "EURUSD"}).json()["entry"]
        assert entry["id"] == saved["id"]
        assert entry["analysis"] == {}

    def test_save_then_read_latest(self, client) -> None:
        saved = _save(
            client,
            candleEnds={"M15": "08:15"},
            checklistState=[{"text": "Bias", "satisfied": True}],
        ).json()

        assert saved["ok"] is True
        assert saved["source"] == "db"
        assert saved["id"]

        data = client.get("/api/analyze-charts", params={"pair": "EURUSD"}).json()
        assert data["source"] == "db"
        assert data["entry"]["id"] == saved["id"]
        assert data["entry"]["analysis"] == {"overview": "Bullish"}
        assert data["entry"]["candleEnds"] == {"M15": "08:15"}
        assert "createdAt" in data["entry"]

    def test_latest_for_unknown_pair_is_null(self, client) -> None:
        data = client.get("/api/analyze-charts", params={"pair": "US30"}).json()
        assert data == {"entry": None, "source": "db"}

    def test_history_is_capped_at_fifty_newest_first(self, client) -> None:
        ids = [_save(client, notes=str(i)).json()["id"] for i in range(55)]

        data = client.get(
            "/api/analyze-charts", params={"pair": "EURUSD", "history": "1"}
        ).json()

        assert len(data["entries"]) == 50
        assert data["entries"][0]["id"] == ids[-1]
        assert ids[0] not in {e["id"] for e in data["entries"]}

    def test_radar_lists_each_pair_once(self, client) -> None:
        _save(client, pair="XAUUSD")
        _save(client, pair="EURUSD")
        _save(client, pair="EURUSD", analysis={"overview": "Bearish"})

        data = client.get("/api/analyze-charts/latest").json()

        assert [e["pair"] for e in data["entries"]] == ["EURUSD", "XAUUSD"]
        assert data["entries"][0]["analysis"] == {"overview": "Bearish"}

    def test_fallback_mode(self, fallback_client) -> None:
        assert _save(fallback_client).json() == {"ok": True, "source": "fallback"}
        assert fallback_client.get(
            "/api/analyze-charts", params={"pair": "EURUSD"}
        ).json() == {"entry": None, "source": "fallback"}
        assert fallback_client.get(
            "/api/analyze-charts", params={"pair": "EURUSD", "history": "true"}
        ).json() == {"entries": [], "source": "fallback"}
        assert fallback_client.get("/api/analyze-charts/latest").json() == {
            "entries": [],
            "source": "fallback",
        }


# ══════════════════════════════════════════════════════════════════════
# Pairs
# ══════════════════════════════════════════════════════════════════════


class TestPairsEndpoint:
    """Tests for GET/POST /api/pairs."""

    def test_seeded_pairs_ordered_by_symbol(self, client) -> None:
        data = client.get("/api/pairs").json()
        assert data == {
            "pairs": ["EURUSD", "GBPUSD", "NAS100", "US30", "XAUUSD"],
            "source": "db",
        }

    def test_post_cleans_and_replaces(self, client) -> None:
        response = client.post("/api/pairs", json={"pairs": ["usdjpy", " ", "USDJPY", "audusd"]})

        assert response.json() == {"pairs": ["USDJPY", "AUDUSD"], "source": "db"}
        assert client.get("/api/pairs").json()["pairs"] == ["AUDUSD", "USDJPY"]

    def test_non_list_pairs_clears_watchlist(self, client) -> None:
        response = client.post("/api/pairs", json={"pairs": "EURUSD"})

        assert response.json()["pairs"] == []
        assert client.get("/api/pairs").json()["pairs"] == []

    def test_malformed_json_returns_400(self, client) -> None:
        response = client.post(
            "/api/pairs",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON body"}

    def test_fallback_returns_defaults(self, fallback_client) -> None:
        data = fallback_client.get("/api/pairs").json()
        assert data["pairs"] == ["EURUSD", "GBPUSD", "XAUUSD", "NAS100", "US30"]
        assert data["source"] == "fallback"


# ══════════════════════════════════════════════════════════════════════
# Generation
# ══════════════════════════════════════════════════════════════════════


class TestAiCoachEndpoint:
    """Tests for POST /api/ai-coach."""

    def _body(self, **overrides):
        body = {
            "pair": "EURUSD",
            "timeframes": ["H4"],
            "images": [{"name": "h4.png", "dataUrl": "data:image/png;base64,AAA"}],
        }
        body.update(overrides)
        return body

    def test_structured_reply(self, client, fake_llm) -> None:
        fake_llm.reply = '{"overview": "Range", "qualityScore": 12}'

        response = client.post("/api/ai-coach", json=self._body())

        assert response.status_code == 200
        analysis = response.json()["analysis"]
        assert analysis["overview"] == "Range"
        assert analysis["qualityScore"] == 10
        assert fake_llm.calls[0]["images"] == ["data:image/png;base64,AAA"]

    def test_unstructured_reply_falls_back(self, client, fake_llm) -> None:
        fake_llm.reply = "Wait for London."

        analysis = client.post("/api/ai-coach", json=self._body()).json()["analysis"]

        assert analysis["overview"] == "Wait for London."

    def test_no_images_returns_400(self, client) -> None:
        response = client.post("/api/ai-coach", json=self._body(images=[]))
        assert response.status_code == 400
        assert response.json() == {"error": "Please upload at least one chart screenshot."}

    def test_provider_failure_returns_500(self, client, fake_llm) -> None:
        fake_llm.error = LLMProviderError("timeout")

        response = client.post("/api/ai-coach", json=self._body())

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to analyze charts."}


class TestExplainModelEndpoint:
    """Tests for POST /api/explain-model."""

    def test_mode_returns_text(self, client, fake_llm) -> None:
        fake_llm.reply = "Step 1..."

        response = client.post(
            "/api/explain-model", json={"model": ENTRY_MODEL, "mode": "examples"}
        )

        assert response.json() == {"text": "Step 1..."}
        assert "London Sweep" in fake_llm.calls[0]["system"]

    def test_guide(self, client, fake_llm) -> None:
        fake_llm.reply = '{"overview": "Idea", "screenshotIdeas": ["H4 high"]}'

        guide = client.post("/api/explain-model", json={"model": ENTRY_MODEL}).json()["guide"]

        assert guide["overview"] == "Idea"
        assert guide["screenshotIdeas"] == [{"label": "Image 1", "description": "H4 high"}]
        assert guide["rulesChecklist"] == []

    def test_guide_with_invalid_json_returns_500(self, client, fake_llm) -> None:
        fake_llm.reply = "Sorry, no JSON today."

        response = client.post("/api/explain-model", json={"model": ENTRY_MODEL})

        assert response.status_code == 500
        assert response.json() == {"error": "AI returned invalid JSON for guide."}

    def test_missing_model_returns_400(self, client) -> None:
        response = client.post("/api/explain-model", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "model is required"}

    def test_unknown_mode_returns_400(self, client) -> None:
        response = client.post(
            "/api/explain-model", json={"model": ENTRY_MODEL, "mode": "roast"}
        )
        assert response.status_code == 400
        assert response.json() == {"error": "mode is invalid"}

    def test_missing_api_key_returns_500(self, client, fake_llm) -> None:
        fake_llm.configured = False

        response = client.post("/api/explain-model", json={"model": ENTRY_MODEL})

        assert response.status_code == 500
        assert response.json() == {"error": "OPENAI_API_KEY is not set on the server"}


class TestGenerateQuizEndpoint:
    def test_quiz(self, client, fake_llm) -> None:
        fake_llm.reply = '{"quiz": [{"question": "Q1", "answer": "A1"}]}'

        response = client.post("/api/generate-quiz", json={"model": ENTRY_MODEL})

        assert response.json() == {"quiz": [{"question": "Q1", "answer": "A1"}]}
        assert "HTF bias\nSweep" in fake_llm.calls[0]["user"]


class TestVideoToModelEndpoint:
    def test_missing_url_returns_400(self, client) -> None:
        response = client.post("/api/video-to-model", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "videoUrl is required."}

    def test_model_keeps_source_url(self, client, fake_llm) -> None:
        fake_llm.reply = '{"name": "Judas Swing", "tags": ["ICT"]}'

        model = client.post(
            "/api/video-to-model", json={"videoUrl": "https://youtu.be/abc"}
        ).json()["model"]

        assert model["name"] == "Judas Swing"
        assert model["sourceVideoUrl"] == "https://youtu.be/abc"
        assert model["riskPerTrade"] == 1.0


# ══════════════════════════════════════════════════════════════════════
# Workspace
# ══════════════════════════════════════════════════════════════════════


class TestWorkspaceEndpoints:
    """Tests for projects, model profiles and videos."""

    def _project(self, client, name: str = "ICT Mentorship") -> str:
        response = client.post("/api/projects", json={"name": name})
        assert response.status_code == 201
        return response.json()["project"]["id"]

    def test_project_lifecycle(self, client) -> None:
        project_id = self._project(client)
        client.post(f"/api/projects/{project_id}/models", json={"name": "Silver Bullet"})
        client.post(f"/api/projects/{project_id}/videos", json={"title": "Ep 1"})

        projects = client.get("/api/projects").json()
        assert [p["name"] for p in projects["projects"]] == ["ICT Mentorship"]

        deleted = client.delete(f"/api/projects/{project_id}").json()
        assert deleted == {"ok": True, "source": "db", "id": project_id}
        assert client.get(f"/api/projects/{project_id}/models").json()["models"] == []
        assert client.get(f"/api/projects/{project_id}/videos").json()["videos"] == []

    def test_model_under_unknown_project_returns_404(self, client) -> None:
        response = client.post("/api/projects/nope/models", json={"name": "OTE"})
        assert response.status_code == 404
        assert response.json() == {"error": "Project not found"}

    def test_blank_project_name_returns_400(self, client) -> None:
        response = client.post("/api/projects", json={"name": "  "})
        assert response.status_code == 400

    def test_delete_missing_video(self, client) -> None:
        response = client.delete("/api/videos/nope")
        assert response.status_code == 200
        assert response.json()["ok"] is False

    def test_model_profile_wire_shape(self, client) -> None:
        project_id = self._project(client)

        model = client.post(
            f"/api/projects/{project_id}/models",
            json={"name": "OTE", "category": "swing", "timeframes": "H4/M15"},
        ).json()["model"]

        assert model["projectId"] == project_id
        assert model["category"] == "swing"
        assert model["createdAt"]

    def test_quiz_model(self, client, fake_llm) -> None:
        project_id = self._project(client)
        model_id = client.post(
            f"/api/projects/{project_id}/models", json={"name": "OTE"}
        ).json()["model"]["id"]
        fake_llm.reply = "not json"

        response = client.post("/api/quiz-model", json={"modelId": model_id})

        assert response.status_code == 200
        assert len(response.json()["questions"]) == 2

    def test_quiz_unknown_model_returns_404(self, client) -> None:
        response = client.post("/api/quiz-model", json={"modelId": "nope"})
        assert response.status_code == 404
        assert response.json() == {"error": "Model not found"}

    def test_suggest_model(self, client, fake_llm) -> None:
        project_id = self._project(client)
        video_id = client.post(
            f"/api/projects/{project_id}/videos",
            json={"title": "Turtle Soup", "url": "https://youtu.be/t"},
        ).json()["video"]["id"]
        fake_llm.reply = '{"name": "Turtle Soup", "category": "weekly", "entry_rules": ["Sweep"]}'

        suggestion = client.post(
            "/api/suggest-model", json={"videoId": video_id}
        ).json()["suggestion"]

        assert suggestion["category"] == "scalping"
        assert suggestion["entry_rules"] == ["Sweep"]
        assert suggestion["stop_rules"] == []

    def test_study_plan(self, client, fake_llm) -> None:
        project_id = self._project(client)
        fake_llm.reply = "Day 1: backtest."

        response = client.post("/api/study-plan", json={"projectId": project_id})

        assert response.json() == {"plan": "Day 1: backtest."}

    def test_fallback_mode(self, fallback_client) -> None:
        created = fallback_client.post("/api/projects", json={"name": "Temp"})
        assert created.json()["source"] == "fallback"
        assert fallback_client.get("/api/projects").json() == {
            "projects": [],
            "source": "fallback",
        }


# ══════════════════════════════════════════════════════════════════════
# Diagnostics
# ══════════════════════════════════════════════════════════════════════


class TestHealthEndpoint:
    """Tests for /api/health, /api/version and /api/db-test."""

    def test_health_returns_ok(self, client) -> None:
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "version" in data

    def test_version(self, client) -> None:
        data = client.get("/api/version").json()
        assert data["version"] == f"v1.0.{data['sha']}"
        assert len(data["sha"]) <= 7
        assert "builtAt" in data

    def test_db_test_with_database(self, client) -> None:
        data = client.get("/api/db-test").json()
        assert data["ok"] is True
        assert data["hasDb"] is True
        assert data["now"]

    def test_db_test_in_fallback_mode(self, fallback_client) -> None:
        response = fallback_client.get("/api/db-test")
        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is False
        assert data["hasDb"] is False
        assert "fallback mode" in data["message"]

    def test_db_test_failure_returns_500(self, client) -> None:
        with patch(
            "chartcoach.infrastructure.coaching.database.SqlDatabaseProbe.server_time",
            side_effect=RuntimeError("down"),
        ):
            response = client.get("/api/db-test")

        assert response.status_code == 500
        assert response.json() == {"ok": False, "hasDb": True, "error": "down"}

    def test_security_headers(self, client) -> None:
        response = client.get("/api/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Cache-Control"] == "no-store"
