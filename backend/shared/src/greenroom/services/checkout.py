"""Checkout request builder and session service.

Flow:
    order draft -> validate -> CheckoutRequest (flat metadata) -> Stripe session

Nothing is sent to Stripe unless the order is eligible.
"""

import datetime as dt
from functools import lru_cache

from greenroom.config import get_settings
from greenroom.models.checkout import CheckoutRequest, CheckoutSession
from greenroom.models.orders import ProductOrder
from greenroom.models.errors import TransportError
from greenroom.services.catalog import Catalog, get_catalog
from greenroom.services.stripe_service import StripeService, get_stripe_service
from greenroom.services.validation import validate_or_raise
from greenroom.utils.logging import get_logger, log_checkout_operation

logger = get_logger(__name__)

SUCCESS_PATH = "/thank-you?session_id={CHECKOUT_SESSION_ID}"
CANCEL_PATH = "/cancelled"


def build_checkout_request(
    order: ProductOrder,
    today: dt.date | None = None,
    catalog: Catalog | None = None,
) -> CheckoutRequest:
    """Turn an order draft into the flat request Stripe receives.

    Args:
        order: Order draft of any product type
        today: Reference date for age checks
        catalog: Catalog override

    Returns:
        CheckoutRequest with serialized metadata

    Raises:
        OrderValidationError: if the order is not eligible
        MetadataTooLargeError: if the order does not fit in Stripe metadata
    """
    valid = validate_or_raise(order, today, catalog)
    return CheckoutRequest(
        product_type=valid.product_type.value,
        amount=valid.amount,
        metadata=valid.payload.to_metadata(),
        customer_email=valid.customer_email,
    )


class CheckoutService:
    """Creates Stripe Checkout sessions for orders."""

    def __init__(
        self,
        stripe_service: StripeService | None = None,
        catalog: Catalog | None = None,
    ) -> None:
        self._stripe = stripe_service or get_stripe_service()
        self._catalog = catalog or get_catalog()

    def start_checkout(
        self,
        order: ProductOrder,
        origin: str | None = None,
        today: dt.date | None = None,
    ) -> CheckoutSession:
        """Validate an order draft and open a checkout session for it.

        Args:
            order: Order draft of any product type
            origin: Site origin for the redirect URLs (defaults to SITE_URL)
            today: Reference date for age checks

        Raises:
            OrderValidationError: if the order is not eligible
            MetadataTooLargeError: if the order does not fit in Stripe metadata
            TransportError: if Stripe fails or returns no URL
        """
        request = build_checkout_request(order, today, self._catalog)
        return self.start_prebuilt_checkout(request, origin)

    def start_prebuilt_checkout(
        self, request: CheckoutRequest, origin: str | None = None
    ) -> CheckoutSession:
        """Open a checkout session for an already assembled request.

        Raises:
            TransportError: if Stripe fails or returns no URL
        """
        base = (origin or get_settings().site_url).rstrip("/")
        amount_cents = request.amount_cents

        log_checkout_operation(
            logger,
            "create_checkout_session",
            product_type=request.product_type,
            amount_cents=amount_cents,
        )
        try:
            session = self._stripe.create_checkout_session(
                product_name=self._catalog.product_name(request.product_type),
                amount_cents=amount_cents,
                success_url=f"{base}{SUCCESS_PATH}",
                cancel_url=f"{base}{CANCEL_PATH}",
                metadata=request.stripe_metadata,
                customer_email=request.customer_email,
            )
        except TransportError as e:
            log_checkout_operation(
                logger,
                "create_checkout_session",
                product_type=request.product_type,
                amount_cents=amount_cents,
                error=e.message,
            )
            raise

        log_checkout_operation(
            logger,
            "checkout_session_created",
            product_type=request.product_type,
            session_id=session.session_id,
        )
        return session


@lru_cache(maxsize=1)
def get_checkout_service() -> CheckoutService:
    """Get the shared CheckoutService instance."""
    return CheckoutService()
