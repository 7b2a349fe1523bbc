"""Tests for API routes."""

from unittest.mock import patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from promptmap.api.routes import router
from promptmap.mapping import MemoryKeyValueStore, SessionPersistence
from promptmap.validation import EvaluationResult


@pytest.fixture
def sessions():
    """Session persistence backed by memory."""
    return SessionPersistence(MemoryKeyValueStore())


@pytest.fixture
def test_client(mock_evaluator, sessions):
    """Create a test client with mocked evaluator and session storage."""
    app = FastAPI()
    app.include_router(router, prefix="/api")

    with patch("promptmap.api.routes.get_evaluator", return_value=mock_evaluator), patch(
        "promptmap.api.routes.get_sessions", return_value=sessions
    ):
        yield TestClient(app)


@pytest.fixture
def table_json(sample_table):
    return sample_table.model_dump(mode="json")


class TestHealthEndpoint:
    """Test the /api/health endpoint."""

    def test_health(self, test_client):
        response = test_client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "promptmap"}


class TestPlaceholderEndpoints:
    """Test detection, suggestion and merging endpoints."""

    def test_detect(self, test_client):
        """Test placeholders are detected and attributed."""
        response = test_client.post(
            "/api/placeholders/detect",
            json={"system_prompt": "", "user_prompt": "Summarize {{Region}} trends"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 1
        assert data["placeholders"][0]["raw"] == "{{Region}}"
        assert data["placeholders"][0]["source"] == "user"

    def test_suggest(self, test_client, sample_catalog):
        """Test suggestions for posted placeholders."""
        detected = test_client.post(
            "/api/placeholders/detect", json={"user_prompt": "{{Region}}"}
        ).json()["placeholders"]

        response = test_client.post(
            "/api/mappings/suggest",
            json={"placeholders": detected, "catalog": sample_catalog.model_dump(mode="json")},
        )

        assert response.status_code == 200
        mapping = response.json()["mappings"][0]
        assert mapping["suggested_field"]["name"] == "Region"
        assert mapping["confidence"] == 100
        assert mapping["mapped_field"] is None

    def test_merge(self, test_client):
        """Test merging applies saved choices."""
        detected = [{"placeholder": "{{Region}}", "field_name": "Region"}]
        persisted = [{"placeholder": "{{Region}}", "field_name": "Region", "keep_as_text": True}]

        response = test_client.post(
            "/api/mappings/merge", json={"detected": detected, "persisted": persisted}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["mappings"][0]["keep_as_text"] is True
        assert data["stats"]["kept_as_text"] == 1

    def test_analyze(self, test_client, table_json):
        """Test detection, matching and merging in one call."""
        response = test_client.post(
            "/api/mappings/analyze",
            json={"user_prompt": "{{Region}} and {{Profit}}", "table": table_json},
        )

        assert response.status_code == 200
        data = response.json()
        assert [m["mapped_field"] for m in data["mappings"]] == ["Region", None]
        assert data["overview"]["status_message"] == "1/2 fields resolved - 1 remaining"
        assert data["overview"]["groups"]["needs_manual_mapping"] == ["{{Profit}}"]


class TestEditEndpoint:
    """Test the /api/mappings/edit endpoint."""

    def _edit(self, client, table_json, **fields):
        body = {"user_prompt": "{{Region}} and {{Profit}}", "table": table_json, **fields}
        return client.post("/api/mappings/edit", json=body)

    def test_set(self, test_client, table_json):
        response = self._edit(
            test_client, table_json, placeholder="{{Profit}}", action="set", field_name="Sales"
        )
        assert response.status_code == 200
        assert response.json()["stats"]["unresolved"] == 0

    def test_set_requires_field(self, test_client, table_json):
        response = self._edit(test_client, table_json, placeholder="{{Profit}}", action="set")
        assert response.status_code == 400

    def test_clear(self, test_client, table_json):
        response = self._edit(test_client, table_json, placeholder="{{Region}}", action="clear")
        assert response.status_code == 200
        assert response.json()["mappings"][0]["mapped_field"] is None

    def test_keep_as_text(self, test_client, table_json):
        response = self._edit(
            test_client, table_json, placeholder="{{Profit}}", action="keep_as_text"
        )
        assert response.status_code == 200
        assert response.json()["stats"]["kept_as_text"] == 1

    def test_unknown_placeholder(self, test_client, table_json):
        response = self._edit(test_client, table_json, placeholder="{{Nope}}", action="clear")
        assert response.status_code == 404

    def test_unknown_action(self, test_client, table_json):
        response = self._edit(test_client, table_json, placeholder="{{Region}}", action="explode")
        assert response.status_code == 400


class TestPromptEndpoints:
    """Test rendering and composition endpoints."""

    def test_render(self, test_client, table_json):
        """Test a mapped placeholder is replaced with data values."""
        response = test_client.post(
            "/api/prompts/render",
            json={
                "prompt_text": "Focus on {{Region}}",
                "mappings": [
                    {"placeholder": "{{Region}}", "field_name": "Region", "mapped_field": "Region"}
                ],
                "table": table_json,
            },
        )

        assert response.status_code == 200
        assert response.json()["rendered"] == "Focus on East, West"

    def test_compose(self, test_client, table_json):
        """Test the composed prompt carries the data context."""
        response = test_client.post(
            "/api/prompts/compose",
            json={"system_prompt": "Analyst", "user_prompt": "Go", "table": table_json},
        )

        assert response.status_code == 200
        prompt = response.json()["prompt"]
        assert prompt.startswith("Analyst\n\nGo\n\nData Context:\n")

    def test_invalid_table_rejected(self, test_client):
        """Test ragged tables fail request validation."""
        response = test_client.post(
            "/api/prompts/render",
            json={
                "prompt_text": "x",
                "table": {"dimensions": [{"title": "Region"}], "rows": [[]]},
            },
        )
        assert response.status_code == 422


class TestValidateEndpoint:
    """Test the /api/selection/validate endpoint."""

    def test_valid_selection(self, test_client, mock_evaluator, table_json):
        """Test an evaluator result of -1 passes."""
        mock_evaluator.evaluate.return_value = EvaluationResult.numeric(-1)

        response = test_client.post(
            "/api/selection/validate",
            json={
                "table": table_json,
                "config": {
                    "enable_custom_validation": True,
                    "custom_validation_expression": "GetSelectedCount(Customer)=1",
                },
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["result"]["valid"] is True
        assert data["result"]["mode"] == "custom_expression"
        assert data["summary"] == "Customer: Acme"

    def test_not_configured(self, test_client, table_json):
        """Test the basic mode when validation is disabled."""
        response = test_client.post("/api/selection/validate", json={"table": table_json})

        data = response.json()
        assert data["result"]["valid"] is False
        assert data["result"]["requires_validation_setup"] is True
        assert data["summary"] == ""


class TestSessionEndpoints:
    """Test session persistence endpoints."""

    def test_save_and_load(self, test_client):
        """Test a saved session can be read back."""
        body = {
            "system_prompt": "System",
            "user_prompt": "{{Region}}",
            "field_mappings": [
                {"placeholder": "{{Region}}", "field_name": "Region", "mapped_field": "Region"}
            ],
        }
        saved = test_client.put("/api/sessions/widget-1", json=body)
        assert saved.status_code == 200

        loaded = test_client.get("/api/sessions/widget-1")
        assert loaded.status_code == 200
        assert loaded.json()["field_mappings"][0]["mapped_field"] == "Region"
        assert loaded.json()["user_prompt"] == "{{Region}}"

    def test_load_missing(self, test_client):
        response = test_client.get("/api/sessions/unknown")
        assert response.status_code == 404

    def test_sweep(self, test_client):
        response = test_client.post("/api/sessions/sweep")
        assert response.status_code == 200
        assert response.json() == {"deleted": 0}
