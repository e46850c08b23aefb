"""Tests for the FastAPI application wiring."""

import pytest
from fastapi.testclient import TestClient

from greenroom_api.middleware.correlation import CORRELATION_ID_HEADER


@pytest.fixture
def client():
    """Create a test client for the FastAPI app."""
    from greenroom_api.main import app

    return TestClient(app)


class TestHealthCheck:
    def test_ping_returns_ok(self, client: TestClient):
        response = client.get("/api/ping")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["service"] == "greenroom-api"
        assert "timestamp" in data

    def test_health_endpoint_returns_healthy(self, client: TestClient):
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"


class TestCorrelationId:
    def test_generated_when_absent(self, client: TestClient):
        response = client.get("/api/health")
        assert response.headers[CORRELATION_ID_HEADER]

    def test_echoes_incoming_id(self, client: TestClient):
        response = client.get("/api/health", headers={CORRELATION_ID_HEADER: "req-123"})
        assert response.headers[CORRELATION_ID_HEADER] == "req-123"


class TestCorsConfiguration:
    def test_preflight_allows_localhost(self, client: TestClient):
        response = client.options(
            "/api/checkout",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"


class TestRoutesRegistered:
    def test_all_routes_mounted_under_api(self):
        from greenroom_api.main import app

        route_paths = {route.path for route in app.routes}

        assert {
            "/api/ping",
            "/api/health",
            "/api/checkout",
            "/api/checkout/session",
            "/api/orders/validate",
            "/api/catalog",
            "/api/webhooks/stripe",
            "/api/upload",
        } <= route_paths

    def test_lambda_handler_exported(self):
        from greenroom_api.main import handler

        assert callable(handler)


class TestCatalogEndpoint:
    def test_returns_public_prices(self, client: TestClient):
        response = client.get("/api/catalog")

        assert response.status_code == 200
        data = response.json()
        assert data["membership"]["price"] == "60"
        assert data["reservation"]["open_days"] == ["Friday", "Saturday"]
        assert data["reservation"]["max_party"] == 4
        assert [item["key"] for item in data["menu"]["items"]] == [
            "wings",
            "mozz",
            "truffle",
            "pretzel",
            "dessert",
        ]

    def test_hides_social_address_and_codeword(self, client: TestClient):
        body = client.get("/api/catalog").text

        assert "GreenLight" not in body
        assert "123 Secret Ave" not in body


class TestValidateEndpoint:
    def test_eligible_reservation(self, client: TestClient, reservation_data):
        response = client.post("/api/orders/validate", json=reservation_data)

        assert response.status_code == 200
        data = response.json()
        assert data["eligible"] is True
        assert data["amount"] == "240"
        assert data["errors"] == []
        assert "order" not in data

    def test_ineligible_reports_fields(self, client: TestClient, reservation_data):
        reservation_data["party_size"] = 5
        response = client.post("/api/orders/validate", json=reservation_data)

        assert response.status_code == 200
        data = response.json()
        assert data["eligible"] is False
        assert "party_size" in [error["field"] for error in data["errors"]]

    def test_unknown_product_type_is_400(self, client: TestClient):
        response = client.post("/api/orders/validate", json={"product_type": "gift-card"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "ERR_VALIDATION"
