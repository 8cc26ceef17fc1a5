"""
Tests for ChartChat API endpoints.
"""

import json

import pytest
from fastapi.testclient import TestClient

from chartchat.config import get_settings
from chartchat.main import app
from chartchat.modules.charts.service import SESSION_STORE
from chartchat.modules.chat.router import get_service as get_chat_service
from chartchat.modules.chat.service import ChatService


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def _memory_host(monkeypatch):
    """Every test gets the in-memory demo report and a fresh session store."""
    monkeypatch.setenv("HOST_MODE", "memory")
    monkeypatch.setenv("FEATURE_CHARTS", "true")
    monkeypatch.setenv("FEATURE_CHAT", "true")
    get_settings.cache_clear()
    SESSION_STORE.clear()
    yield
    SESSION_STORE.clear()
    app.dependency_overrides.clear()
    get_settings.cache_clear()


SALES_BY_MONTH = {"yAxis": "Sales.TotalSales", "xAxis": "Time.Month", "chartType": "lineChart"}


class TestHealth:
    """Health check tests."""

    def test_health_check(self, client):
        """Test health endpoint returns healthy status."""
        response = client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["features"] == {"charts": True, "chat": True}
        assert data["host_mode"] == "memory"

    def test_request_id_is_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "abc"})
        assert response.headers["X-Request-ID"] == "abc"


class TestRoot:
    """Root endpoint tests."""

    def test_root_endpoint(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["docs"] == "/docs"

    def test_openapi_available(self, client):
        response = client.get("/openapi.json")
        assert response.status_code == 200
        assert response.json()["info"]["title"] == "ChartChat API"


class TestChartsEndpoints:
    """Chart session endpoint tests."""

    def test_apply_intent(self, client):
        response = client.post("/charts/sessions/s1/intent", json=SALES_BY_MONTH)
        assert response.status_code == 200

        data = response.json()
        assert data["committed"] is True
        assert data["visualType"] == "lineChart"
        assert data["appliedConfiguration"] == {**SALES_BY_MONTH, "series": None}

    def test_configuration_follows_commits(self, client):
        client.post("/charts/sessions/s1/intent", json=SALES_BY_MONTH)
        client.post("/charts/sessions/s1/intent", json={"chartType": "barChart"})

        response = client.get("/charts/sessions/s1/configuration")

        assert response.status_code == 200
        assert response.json()["chartType"] == "barChart"
        assert response.json()["yAxis"] == "Sales.TotalSales"

    def test_incomplete_intent_is_not_committed(self, client):
        response = client.post("/charts/sessions/s1/intent", json={"yAxis": "Sales.TotalSales"})

        assert response.status_code == 200
        assert response.json()["committed"] is False
        assert client.get("/charts/sessions/s1/configuration").json()["yAxis"] is None

    def test_sessions_are_isolated(self, client):
        client.post("/charts/sessions/s1/intent", json=SALES_BY_MONTH)

        response = client.get("/charts/sessions/s2/configuration")

        assert response.json() == {"yAxis": None, "xAxis": None, "chartType": None, "series": None}

    def test_unsupported_chart_type_is_rejected(self, client):
        response = client.post("/charts/sessions/s1/intent", json={"chartType": "radarChart"})
        assert response.status_code == 422

    def test_rendered_reads_live_visual(self, client):
        response = client.post("/charts/sessions/s1/rendered")

        assert response.status_code == 200
        assert response.json()["chartType"] == "lineChart"

    def test_end_session(self, client):
        client.post("/charts/sessions/s1/intent", json=SALES_BY_MONTH)

        first = client.delete("/charts/sessions/s1")
        second = client.delete("/charts/sessions/s1")

        assert first.json() == {"sessionId": "s1", "ended": True}
        assert second.json()["ended"] is False

    def test_feature_disabled(self, client, monkeypatch):
        monkeypatch.setenv("FEATURE_CHARTS", "false")
        get_settings.cache_clear()

        response = client.get("/charts/sessions/s1/configuration")

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "FEATURE_DISABLED"
        assert set(response.json()["error"]) == {"code", "message", "details", "request_id"}
        assert response.json()["error"]["details"] == {"feature": "charts"}

    def test_error_responses_are_documented(self, client):
        operation = client.get("/openapi.json").json()["paths"]["/charts/sessions/{session_id}/intent"]["post"]

        for status in ("404", "409", "502", "503", "504"):
            schema = operation["responses"][status]["content"]["application/json"]["schema"]
            assert schema == {"$ref": "#/components/schemas/ErrorResponse"}


class StaticAssistant:
    def __init__(self, text: str):
        self.text = text

    async def complete(self, system_prompt: str, message: str) -> str:
        return self.text


class TestChatEndpoint:
    """Chat endpoint tests."""

    def _use_assistant(self, text: str):
        app.dependency_overrides[get_chat_service] = lambda: ChatService(assistant=StaticAssistant(text))

    def test_chat_applies_chart_action(self, client):
        self._use_assistant(json.dumps({"chatResponse": "Sales by month", "chartAction": SALES_BY_MONTH}))

        response = client.post("/chat", json={"sessionId": "s1", "message": "sales by month"})

        assert response.status_code == 200
        data = response.json()
        assert data["chatResponse"] == "Sales by month"
        assert data["appliedConfiguration"]["xAxis"] == "Time.Month"
        assert data["chartError"] is None
        assert client.get("/charts/sessions/s1/configuration").json()["yAxis"] == "Sales.TotalSales"

    def test_chat_requires_message(self, client):
        response = client.post("/chat", json={"sessionId": "s1", "message": ""})
        assert response.status_code == 422

    def test_chat_feature_disabled(self, client, monkeypatch):
        monkeypatch.setenv("FEATURE_CHAT", "false")
        get_settings.cache_clear()

        response = client.post("/chat", json={"sessionId": "s1", "message": "hi"})

        assert response.status_code == 503
