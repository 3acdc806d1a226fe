"""Integration tests for the REST API."""

import pytest
from fastapi.testclient import TestClient

from ledlayout.web import create_app


@pytest.fixture
def client() -> TestClient:
    """Create a test client for the API."""
    return TestClient(create_app())


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestLayoutEndpoints:
    """Tests for the /api/v1/layouts endpoints."""

    def test_normalize(self, client: TestClient, layout_document) -> None:
        layout_document["cabinets"][0]["rot_deg"] = 100
        response = client.post("/api/v1/layouts/normalize", json={"layout": layout_document})

        assert response.status_code == 200
        cabinets = response.json()["layout"]["cabinets"]
        assert cabinets[0]["rot_deg"] == 90
        assert cabinets[0]["receiverCardCount"] == 1

    def test_validate_clean(self, client: TestClient, layout_document) -> None:
        response = client.post("/api/v1/layouts/validate", json={"layout": layout_document})

        assert response.status_code == 200
        assert response.json() == {"is_valid": True, "exit_code": 0, "errors": [], "warnings": []}

    def test_validate_with_errors(self, client: TestClient, layout_document) -> None:
        layout_document["cabinets"][1]["typeId"] = "ghost"
        response = client.post("/api/v1/layouts/validate", json={"layout": layout_document})

        data = response.json()
        assert data["is_valid"] is False
        assert data["exit_code"] == 1
        assert data["errors"][0] == {
            "code": "MISSING_TYPE",
            "severity": "error",
            "cabinet_ids": ["C2"],
            "message": "Cabinet C2 has unknown type: ghost",
        }

    def test_summary(self, client: TestClient, layout_document) -> None:
        response = client.post("/api/v1/layouts/summary", json={"layout": layout_document})

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Main Stage"
        assert data["cabinet_count"] == 2
        assert data["bounds"]["width_mm"] == 1280
        assert data["bounds"]["width_px"] == 512
        assert data["controller"]["model"] == "A100"
        assert data["controller"]["over_limit"] is False
        assert data["grid_labels"] == {"C1": "A1", "C2": "B1"}

    def test_auto_route(self, client: TestClient, layout_document) -> None:
        response = client.post("/api/v1/layouts/auto-route", json={"layout": layout_document})

        routes = response.json()["layout"]["project"]["dataRoutes"]
        assert [(r["port"], r["cabinetIds"]) for r in routes] == [(1, ["C1"]), (2, ["C2"])]

    def test_auto_power(self, client: TestClient, layout_document) -> None:
        response = client.post("/api/v1/layouts/auto-power", json={"layout": layout_document})

        feeds = response.json()["layout"]["project"]["powerFeeds"]
        assert feeds[0]["id"] == "feed-1"
        assert feeds[0]["assignedCabinetIds"] == ["C1", "C2"]


class TestErrors:
    """Tests for rejected documents."""

    def test_missing_keys(self, client: TestClient) -> None:
        response = client.post("/api/v1/layouts/validate", json={"layout": {"project": {}}})

        assert response.status_code == 422
        data = response.json()
        assert data["error_type"] == "missing_keys"
        assert data["details"] == [{"key": "schemaVersion"}, {"key": "cabinets"}]

    def test_request_without_layout(self, client: TestClient) -> None:
        response = client.post("/api/v1/layouts/summary", json={})
        assert response.status_code == 422
