"""Stripe integration for Checkout sessions and webhook verification.

Uses the v8+ StripeClient pattern. Keys come from the environment when set,
otherwise from SSM Parameter Store under ``/greenroom/{env}/stripe/``.
"""

import logging
from datetime import datetime, timezone
from functools import lru_cache

import stripe
from stripe import StripeClient

from greenroom.config import Settings, get_settings
from greenroom.models.checkout import CheckoutSession
from greenroom.models.errors import (
    ErrorCode,
    GreenRoomError,
    SignatureError,
    TransportError,
    is_stripe_error_retryable,
)
from greenroom.services.ssm_service import SSMServiceError, get_ssm_service

logger = logging.getLogger(__name__)

# Hosted checkout pages expire after 30 minutes
CHECKOUT_SESSION_TTL_SECONDS = 1800


class StripeService:
    """Service for Stripe payment operations.

    Handles:
    - Checkout session creation
    - Webhook signature verification

    Usage:
        stripe_svc = get_stripe_service()
        session = stripe_svc.create_checkout_session(
            product_name="Cafe Reservation",
            amount_cents=23000,
            metadata={"type": "reservation"},
            success_url="https://example.com/thank-you?session_id={CHECKOUT_SESSION_ID}",
            cancel_url="https://example.com/cancelled",
        )
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the service; credentials are resolved lazily.

        Args:
            settings: Settings override (defaults to the process settings)
        """
        self._settings = settings or get_settings()
        self._client: StripeClient | None = None
        self._webhook_secret: str | None = self._settings.stripe_webhook_secret

    def _get_secret(self, name: str) -> str:
        path = f"{self._settings.ssm_prefix}/stripe/{name}"
        try:
            return get_ssm_service().get_parameter(path)
        except SSMServiceError as e:
            logger.error("Stripe %s unavailable: %s", name, e)
            raise GreenRoomError(
                ErrorCode.CONFIGURATION_MISSING, details={"parameter": path}
            ) from e

    def _get_client(self) -> StripeClient:
        """Get or create the Stripe client (lazy initialization).

        Raises:
            GreenRoomError: If no secret key is configured.
        """
        if self._client is None:
            secret_key = self._settings.stripe_secret_key or self._get_secret("secret_key")
            self._client = StripeClient(secret_key)
            logger.info("Stripe client initialized for environment: %s", self._settings.environment)
        return self._client

    def _get_webhook_secret(self) -> str:
        if self._webhook_secret is None:
            self._webhook_secret = self._get_secret("webhook_secret")
        return self._webhook_secret

    def create_checkout_session(
        self,
        *,
        product_name: str,
        amount_cents: int,
        success_url: str,
        cancel_url: str,
        metadata: dict[str, str] | None = None,
        customer_email: str | None = None,
        idempotency_key: str | None = None,
    ) -> CheckoutSession:
        """Create a one-line-item Stripe Checkout session.

        Args:
            product_name: Line item name shown on the hosted page
            amount_cents: Amount in the smallest currency unit
            success_url: Redirect on success (supports {CHECKOUT_SESSION_ID})
            cancel_url: Redirect on cancel
            metadata: Flat string metadata returned on the completion event
            customer_email: Prefills the email field and receipt address
            idempotency_key: Optional Stripe idempotency key

        Returns:
            The created session's id and hosted URL.

        Raises:
            TransportError: If Stripe rejects the request or returns no URL.
        """
        client = self._get_client()

        params: dict = {
            "mode": "payment",
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "price_data": {
                        "currency": self._settings.checkout_currency,
                        "unit_amount": amount_cents,
                        "product_data": {"name": product_name},
                    },
                    "quantity": 1,
                }
            ],
            "success_url": success_url,
            "cancel_url": cancel_url,
            "metadata": metadata or {},
            "expires_at": int(datetime.now(timezone.utc).timestamp())
            + CHECKOUT_SESSION_TTL_SECONDS,
        }
        if customer_email:
            params["customer_email"] = customer_email

        options = {"idempotency_key": idempotency_key} if idempotency_key else {}

        try:
            logger.info(
                "Creating Stripe checkout session for %s, amount %d cents",
                product_name,
                amount_cents,
            )
            session = client.checkout.sessions.create(params=params, options=options)
        except stripe.StripeError as e:
            error_code = getattr(e, "code", None)
            logger.error(
                "Stripe checkout session creation failed: %s (code: %s)", str(e), error_code
            )
            details = {"retryable": str(is_stripe_error_retryable(error_code)).lower()}
            if error_code:
                details["stripe_error_code"] = error_code
            raise TransportError(details=details, stripe_error_code=error_code) from e

        if not session.url:
            logger.error("Checkout session %s returned without a URL", session.id)
            raise TransportError(
                ErrorCode.CHECKOUT_URL_MISSING, details={"session_id": str(session.id)}
            )

        logger.info("Checkout session created: %s", session.id)
        return CheckoutSession(url=session.url, session_id=session.id)

    def verify_webhook_signature(self, payload: bytes, signature: str | None) -> dict:
        """Verify a webhook signature and parse the event.

        Args:
            payload: Raw request body bytes (unparsed)
            signature: Stripe-Signature header value

        Returns:
            The event as a plain dict.

        Raises:
            SignatureError: If the header is missing or does not match.
        """
        if not signature:
            logger.warning("Webhook request missing Stripe-Signature header")
            raise SignatureError("Missing Stripe-Signature header")

        webhook_secret = self._get_webhook_secret()

        try:
            event = stripe.Webhook.construct_event(payload, signature, webhook_secret)
        except stripe.SignatureVerificationError as e:
            logger.warning("Invalid webhook signature: %s", str(e))
            raise SignatureError("Invalid webhook signature") from e
        except ValueError as e:
            logger.warning("Unreadable webhook payload: %s", str(e))
            raise SignatureError("Webhook payload is not valid JSON") from e

        data = event.to_dict()
        logger.info("Webhook signature verified for event: %s", data.get("id"))
        return data


@lru_cache(maxsize=1)
def get_stripe_service() -> StripeService:
    """Get the shared StripeService instance (singleton pattern)."""
    return StripeService()
