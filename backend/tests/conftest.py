"""Pytest configuration and fixtures for The Green Room backend tests.

Provides:
- Test environment (Stripe test secrets, SES sender, admin address, bucket)
- Service/settings cache resets between tests
- Valid order drafts for each product type
- Stripe webhook signing helpers
"""

import hashlib
import hmac
import json
import os
import time
from datetime import date
from typing import Any, Callable, Generator

import pytest

# === Environment Setup ===

# Set before any greenroom import so cached settings see them
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ["ENVIRONMENT"] = "test"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_greenroom"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test_greenroom"
os.environ["SES_FROM_EMAIL"] = "hello@greenroom.test"
os.environ["ADMIN_NOTIFY_EMAIL"] = "admin@greenroom.test"
os.environ["UPLOAD_BUCKET"] = "greenroom-test-uploads"
os.environ["SITE_URL"] = "https://greenroom.test"

# Only set fake credentials for moto if no real credentials are present
if not os.environ.get("AWS_PROFILE") and not os.environ.get("AWS_ACCESS_KEY_ID"):
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

TEST_WEBHOOK_SECRET = os.environ["STRIPE_WEBHOOK_SECRET"]

# Fixed reference date for age checks (a Monday)
TODAY = date(2026, 10, 19)
# A Friday and a Sunday near TODAY
FRIDAY = "2026-10-23"
SUNDAY = "2026-10-25"


# === Cache Reset ===


@pytest.fixture(autouse=True)
def reset_service_singletons() -> Generator[None, None, None]:
    """Clear cached settings and services before and after each test."""
    from greenroom_api.dependencies import reset_services

    reset_services()
    yield
    reset_services()


@pytest.fixture
def aws_credentials() -> None:
    """Mocked AWS credentials for moto."""
    if not os.environ.get("AWS_PROFILE"):
        os.environ["AWS_ACCESS_KEY_ID"] = "testing"
        os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
        os.environ["AWS_SECURITY_TOKEN"] = "testing"
        os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


# === Order Draft Fixtures ===


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def membership_data() -> dict[str, Any]:
    """Complete membership signup form."""
    return {
        "product_type": "membership",
        "email": "ada@example.com",
        "phone": "(555) 123-4567",
        "full_name": "Ada Lovelace",
        "dob": "1990-12-10",
        "address": "12 St James's Square, London",
        "photo_url": "https://cdn.greenroom.test/uploads/ada.jpg",
        "why_join": "Great coffee and better company",
        "favorite_item": "Truffle fries",
        "how_heard": "A friend",
    }


@pytest.fixture
def reservation_data() -> dict[str, Any]:
    """Complete reservation for three guests on a Friday."""
    return {
        "product_type": "reservation",
        "contact_name": "Ada Lovelace",
        "email": "ada@example.com",
        "phone": "555-123-4567",
        "is_member": False,
        "date": FRIDAY,
        "time": "7:00 PM",
        "party_size": 3,
        "guests": [
            {"full_name": "Ada Lovelace", "dob": "1990-12-10"},
            {"full_name": "Charles Babbage", "dob": "1991-12-26"},
            {"full_name": "Mary Somerville", "dob": "1980-12-26"},
        ],
    }


@pytest.fixture
def social_member_data() -> dict[str, Any]:
    """Member social entry with one guest."""
    return {
        "product_type": "social-entry",
        "email": "ada@example.com",
        "phone": "5551234567",
        "is_member": True,
        "attendee": {"full_name": "Ada Lovelace", "dob": "1990-12-10", "id_number": "D1234567"},
        "has_guest": True,
        "guest": {
            "full_name": "Charles Babbage",
            "dob": "1991-12-26",
            "photo_url": "https://cdn.greenroom.test/uploads/charles.jpg",
        },
        "how_heard": "Instagram",
    }


@pytest.fixture
def social_non_member_data() -> dict[str, Any]:
    """Non-member social entry (photo required, no guest)."""
    return {
        "product_type": "social-entry",
        "email": "grace@example.com",
        "phone": "+1 555 987 6543",
        "is_member": False,
        "attendee": {
            "full_name": "Grace Hopper",
            "dob": "1985-12-09",
            "photo_url": "https://cdn.greenroom.test/uploads/grace.jpg",
            "id_number": "H7654321",
        },
        "has_guest": False,
        "how_heard": "Walked past",
    }


@pytest.fixture
def menu_data() -> dict[str, Any]:
    """Two wings plus one enhanced mozzarella sticks (total 44)."""
    return {
        "product_type": "after-dark-order",
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "phone": "555-123-4567",
        "items": [
            {"key": "wings", "quantity": 2, "enhance": False},
            {"key": "mozz", "quantity": 1, "enhance": True},
        ],
    }


# === Stripe Webhook Helpers ===


def create_stripe_signature(payload: bytes, secret: str = TEST_WEBHOOK_SECRET) -> str:
    """Create a valid Stripe webhook signature.

    Stripe signatures use HMAC-SHA256 with format: t={timestamp},v1={signature}
    """
    timestamp = str(int(time.time()))
    signed_payload = f"{timestamp}.{payload.decode('utf-8')}"
    signature = hmac.new(
        secret.encode("utf-8"),
        signed_payload.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return f"t={timestamp},v1={signature}"


def create_checkout_completed_event(
    metadata: dict[str, str] | None,
    amount_total: int = 0,
    event_id: str = "evt_1GreenRoom",
    event_type: str = "checkout.session.completed",
) -> dict[str, Any]:
    """Build a checkout.session.completed webhook event."""
    return {
        "id": event_id,
        "type": event_type,
        "created": int(time.time()),
        "data": {
            "object": {
                "id": "cs_test_greenroom",
                "object": "checkout.session",
                "payment_status": "paid",
                "amount_total": amount_total,
                "currency": "usd",
                "metadata": metadata or {},
            },
        },
    }


@pytest.fixture
def stripe_signature() -> Callable[..., str]:
    return create_stripe_signature


@pytest.fixture
def checkout_event() -> Callable[..., dict[str, Any]]:
    return create_checkout_completed_event


@pytest.fixture
def signed_event() -> Callable[..., tuple[bytes, str]]:
    """Serialize an event and sign it with the test webhook secret."""

    def _sign(event: dict[str, Any], secret: str = TEST_WEBHOOK_SECRET) -> tuple[bytes, str]:
        payload = json.dumps(event).encode("utf-8")
        return payload, create_stripe_signature(payload, secret)

    return _sign
