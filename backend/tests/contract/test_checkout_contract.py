"""Contract tests for POST /checkout and POST /checkout/session.

Stripe is replaced by a mocked StripeService; everything else (validation,
metadata, error mapping) runs for real.
"""

from typing import Generator
from unittest.mock import MagicMock

import pytest
import stripe
from fastapi.testclient import TestClient
from starlette.status import (
    HTTP_200_OK,
    HTTP_400_BAD_REQUEST,
    HTTP_405_METHOD_NOT_ALLOWED,
    HTTP_502_BAD_GATEWAY,
)

from greenroom.config import Settings
from greenroom.models.checkout import CheckoutSession
from greenroom.models.errors import ErrorCode, TransportError
from greenroom.services.checkout import CheckoutService
from greenroom.services.stripe_service import StripeService
from greenroom_api.dependencies import get_checkout_service
from greenroom_api.main import app

SESSION_URL = "https://checkout.stripe.com/c/pay/cs_test_contract"


# === Test Fixtures ===


@pytest.fixture
def mock_stripe_service() -> MagicMock:
    service = MagicMock()
    service.create_checkout_session.return_value = CheckoutSession(
        url=SESSION_URL, session_id="cs_test_contract"
    )
    return service


@pytest.fixture
def client(mock_stripe_service) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_checkout_service] = lambda: CheckoutService(
        stripe_service=mock_stripe_service
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


# === POST /checkout ===


class TestCheckoutSuccess:
    @pytest.mark.parametrize(
        "fixture_name,amount_cents",
        [
            ("membership_data", 6000),
            ("reservation_data", 24000),
            ("social_member_data", 2500),
            ("social_non_member_data", 2000),
            ("menu_data", 4400),
        ],
    )
    def test_returns_session_url(
        self, request, client, mock_stripe_service, fixture_name, amount_cents
    ):
        response = client.post("/api/checkout", json=request.getfixturevalue(fixture_name))

        assert response.status_code == HTTP_200_OK
        assert response.json() == {"url": SESSION_URL, "session_id": "cs_test_contract"}
        kwargs = mock_stripe_service.create_checkout_session.call_args.kwargs
        assert kwargs["amount_cents"] == amount_cents

    def test_redirects_follow_origin_header(self, client, mock_stripe_service, membership_data):
        client.post(
            "/api/checkout",
            json=membership_data,
            headers={"Origin": "https://greenroom.example"},
        )

        kwargs = mock_stripe_service.create_checkout_session.call_args.kwargs
        assert kwargs["success_url"].startswith("https://greenroom.example/thank-you?session_id=")
        assert kwargs["cancel_url"] == "https://greenroom.example/cancelled"

    def test_client_supplied_amount_is_ignored(self, client, mock_stripe_service, membership_data):
        membership_data["amount"] = 1

        client.post("/api/checkout", json=membership_data)

        kwargs = mock_stripe_service.create_checkout_session.call_args.kwargs
        assert kwargs["amount_cents"] == 6000


class TestCheckoutRejected:
    def test_ineligible_order_is_400_with_field_errors(
        self, client, mock_stripe_service, reservation_data
    ):
        reservation_data["date"] = "2026-10-25"
        reservation_data["guests"][0]["dob"] = "2010-05-05"

        response = client.post("/api/checkout", json=reservation_data)

        assert response.status_code == HTTP_400_BAD_REQUEST
        data = response.json()
        assert data["success"] is False
        assert data["error_code"] == "ERR_ORDER_001"
        assert data["details"] == {"product_type": "reservation"}
        assert {e["field"] for e in data["field_errors"]} == {"date", "guests.0.dob"}
        mock_stripe_service.create_checkout_session.assert_not_called()

    def test_order_too_large_for_metadata_is_400(self, client, mock_stripe_service, membership_data):
        membership_data["why_join"] = "x" * 25_000

        response = client.post("/api/checkout", json=membership_data)

        assert response.status_code == HTTP_400_BAD_REQUEST
        data = response.json()
        assert data["error_code"] == "ERR_ORDER_002"
        assert data["details"]["max_keys"] == "50"
        mock_stripe_service.create_checkout_session.assert_not_called()

    def test_missing_product_type_is_400(self, client, mock_stripe_service):
        response = client.post("/api/checkout", json={"email": "ada@example.com"})

        assert response.status_code == HTTP_400_BAD_REQUEST
        assert response.json()["error_code"] == "ERR_VALIDATION"
        mock_stripe_service.create_checkout_session.assert_not_called()

    def test_malformed_json_is_400(self, client):
        response = client.post(
            "/api/checkout", content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == HTTP_400_BAD_REQUEST


class TestCheckoutStripeFailure:
    def test_stripe_error_is_502_with_retry_hint(self, membership_data):
        settings = Settings(stripe_secret_key="sk_test_greenroom")
        stripe_service = StripeService(settings)
        stripe_service._client = MagicMock()
        stripe_service._client.checkout.sessions.create.side_effect = stripe.StripeError(
            "connection reset", code="api_connection_error"
        )
        app.dependency_overrides[get_checkout_service] = lambda: CheckoutService(
            stripe_service=stripe_service
        )
        try:
            response = TestClient(app).post("/api/checkout", json=membership_data)
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == HTTP_502_BAD_GATEWAY
        data = response.json()
        assert data["error_code"] == "ERR_STRIPE_002"
        assert data["recovery"] == "Please try again"
        assert data["details"]["retryable"] == "true"

    def test_missing_url_is_502(self, client, mock_stripe_service, membership_data):
        mock_stripe_service.create_checkout_session.side_effect = TransportError(
            ErrorCode.CHECKOUT_URL_MISSING
        )

        response = client.post("/api/checkout", json=membership_data)

        assert response.status_code == HTTP_502_BAD_GATEWAY
        assert response.json()["error_code"] == "ERR_STRIPE_003"


# === POST /checkout/session ===


class TestPrebuiltCheckout:
    def test_type_and_meta_aliases(self, client, mock_stripe_service):
        response = client.post(
            "/api/checkout/session",
            json={"type": "social-entry", "amount": 25, "meta": {"fullName": "Ada", "hasGuest": True}},
        )

        assert response.status_code == HTTP_200_OK
        kwargs = mock_stripe_service.create_checkout_session.call_args.kwargs
        assert kwargs["amount_cents"] == 2500
        assert kwargs["metadata"] == {"fullName": "Ada", "hasGuest": "true", "type": "social-entry"}

    def test_product_type_and_metadata_keys(self, client, mock_stripe_service):
        response = client.post(
            "/api/checkout/session",
            json={"productType": "after-dark-order", "amount": "44.00", "metadata": {"name": "Ada"}},
        )

        assert response.status_code == HTTP_200_OK
        assert mock_stripe_service.create_checkout_session.call_args.kwargs["amount_cents"] == 4400

    @pytest.mark.parametrize("amount", [0, -5, "free"])
    def test_non_positive_amount_is_400(self, client, mock_stripe_service, amount):
        response = client.post("/api/checkout/session", json={"type": "membership", "amount": amount})

        assert response.status_code == HTTP_400_BAD_REQUEST
        mock_stripe_service.create_checkout_session.assert_not_called()

    def test_missing_type_is_400(self, client):
        response = client.post("/api/checkout/session", json={"amount": 60})
        assert response.status_code == HTTP_400_BAD_REQUEST

    def test_get_is_405(self, client, mock_stripe_service):
        response = client.get("/api/checkout")

        assert response.status_code == HTTP_405_METHOD_NOT_ALLOWED
        mock_stripe_service.create_checkout_session.assert_not_called()
