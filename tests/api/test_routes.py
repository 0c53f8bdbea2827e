"""Tests for the scenario conversion API."""

from unittest.mock import patch

import pytest
import yaml
from fastapi.testclient import TestClient

from scenariogen.api.app import create_app


@pytest.fixture
def client():
    return TestClient(create_app())


class TestAppFactory:
    """Tests for create_app."""

    def test_create_app_configures_logging(self):
        with patch("scenariogen.api.app.configure_logging") as configure:
            create_app()

        configure.assert_called_once_with("INFO", False)


class TestHealth:
    """Tests for the health endpoint."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestConvertEndpoint:
    """Tests for POST /api/v1/scenarios/convert."""

    def test_convert_success(self, client, login_recording):
        response = client.post("/api/v1/scenarios/convert", json={"actions": login_recording})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["steps_generated"] == 5
        assert data["skipped"] == 1
        assert data["error"] is None
        document = yaml.safe_load(data["yaml"])
        assert document["name"] == "example.com"

    def test_convert_with_base_url_and_name(self, client, action_factory):
        body = {
            "actions": [action_factory("navigate", url="https://example.com/pricing")],
            "base_url": "https://example.com",
            "name": "Pricing",
        }

        data = client.post("/api/v1/scenarios/convert", json=body).json()

        document = yaml.safe_load(data["yaml"])
        assert document["name"] == "Pricing"
        assert document["steps"][0]["url"] == "/pricing"

    def test_convert_debug(self, client, action_factory):
        body = {"actions": [action_factory("click", selector="css=#go")], "debug": True}

        data = client.post("/api/v1/scenarios/convert", json=body).json()

        step = yaml.safe_load(data["yaml"])["steps"][0]
        assert step["debug"]["parsed_selector"]["basePart"]["source"] == "#go"

    def test_malformed_action(self, client):
        response = client.post(
            "/api/v1/scenarios/convert", json={"actions": [{"frame": {}}]}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is False
        assert "missing 'action'" in data["error"]
        assert data["yaml"] is None

    def test_missing_actions_field(self, client):
        response = client.post("/api/v1/scenarios/convert", json={})

        assert response.status_code == 422
