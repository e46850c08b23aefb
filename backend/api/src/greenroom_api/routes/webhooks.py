"""Webhook endpoint for Stripe events.

No authentication: the payload is authenticated by its Stripe-Signature
header, verified against the raw (unparsed) body.
"""

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from greenroom.models.errors import ErrorResponse
from greenroom.services.webhook_dispatcher import WebhookDispatcher
from greenroom_api.dependencies import get_webhook_dispatcher
from greenroom_api.models.checkout import WebhookResponse

router = APIRouter(tags=["webhooks"])


@router.post(
    "/webhooks/stripe",
    summary="Receive Stripe webhook events",
    description="""
Handles `checkout.session.completed`: renders the confirmation for the
product type in the session metadata and sends the customer email, customer
SMS and admin copy. Other event types are acknowledged and ignored.

**Responses:**
- 200 once every notification attempt has been made, whatever their outcome
- 400 when the signature is missing or invalid (nothing is sent)
- 500 on any other failure before notifications go out, so Stripe retries
""",
    response_model=WebhookResponse,
    responses={
        400: {"description": "Invalid or missing signature", "model": ErrorResponse},
        500: {"description": "Processing failed; Stripe will retry"},
    },
)
async def handle_stripe_webhook(
    request: Request,
    dispatcher: WebhookDispatcher = Depends(get_webhook_dispatcher),
) -> WebhookResponse:
    payload = await request.body()
    signature = request.headers.get("Stripe-Signature")
    report = await run_in_threadpool(dispatcher.handle, payload, signature)
    return WebhookResponse.from_report(report)
