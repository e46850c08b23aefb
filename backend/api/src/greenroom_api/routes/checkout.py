"""Checkout endpoints.

Provides:
- POST /checkout: validate an order draft and open a Stripe Checkout session
- POST /checkout/session: open a session for a prebuilt {type, amount, metadata}
"""

from fastapi import APIRouter, Depends, Request

from greenroom.models.checkout import CheckoutRequest
from greenroom.models.errors import ErrorResponse
from greenroom.services.checkout import CheckoutService
from greenroom_api.dependencies import get_checkout_service
from greenroom_api.models.checkout import CheckoutResponse, OrderRequest

router = APIRouter(tags=["checkout"])

_ERROR_RESPONSES = {
    400: {"description": "Order not eligible or body not parseable", "model": ErrorResponse},
    502: {"description": "Stripe unavailable; ask the customer to retry", "model": ErrorResponse},
}


def _origin(request: Request) -> str | None:
    return request.headers.get("origin")


@router.post(
    "/checkout",
    summary="Start checkout for an order",
    description="""
Validate an order draft (membership, reservation, social-entry or
after-dark-order, tagged by `product_type`) and create a Stripe Checkout
session for it.

**Notes:**
- Price is computed server-side from the published catalog
- Nothing is sent to Stripe when the order is not eligible (400 with field errors)
- Redirect URLs use the request Origin header, falling back to SITE_URL
""",
    response_model=CheckoutResponse,
    responses=_ERROR_RESPONSES,
)
def create_checkout(
    body: OrderRequest,
    request: Request,
    checkout: CheckoutService = Depends(get_checkout_service),
) -> CheckoutResponse:
    session = checkout.start_checkout(body.root, _origin(request))
    return CheckoutResponse(url=session.url, session_id=session.session_id)


@router.post(
    "/checkout/session",
    summary="Start checkout for a prebuilt request",
    description="""
Create a Stripe Checkout session from `{type | productType, amount, metadata | meta}`.
`amount` is in major currency units; metadata values are sent as strings.
""",
    response_model=CheckoutResponse,
    responses=_ERROR_RESPONSES,
)
def create_checkout_session(
    body: CheckoutRequest,
    request: Request,
    checkout: CheckoutService = Depends(get_checkout_service),
) -> CheckoutResponse:
    session = checkout.start_prebuilt_checkout(body, _origin(request))
    return CheckoutResponse(url=session.url, session_id=session.session_id)
