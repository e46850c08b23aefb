"""Webhook dispatcher for completed Stripe payments.

Per event:
1. Verify the signature (fails closed, nothing is sent)
2. Classify: only ``checkout.session.completed`` proceeds
3. Extract the amount and the typed payload from metadata
4. Render the confirmation for the product type
5. Send customer email, customer SMS and the admin copy concurrently;
   each channel failure is logged and recorded without affecting the others
6. Return a DispatchReport

Errors in steps 1-4 propagate so the caller can answer 400 (signature) or
500 (anything else, which makes Stripe redeliver). No state is kept between
events: redelivery repeats the same attempts.
"""

import contextvars
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from functools import lru_cache
from typing import Any, Callable, Mapping

from greenroom.config import Settings, get_settings
from greenroom.models.enums import DeliveryStatus, NotificationChannel, ProcessingResult
from greenroom.models.metadata import join_metadata_values, parse_metadata
from greenroom.models.notifications import ChannelAttempt, DispatchReport, Notification
from greenroom.services.catalog import Catalog, get_catalog
from greenroom.services.email_service import EmailService, get_email_service
from greenroom.services.notification_templates import admin_copy, render
from greenroom.services.sms_service import SmsService, get_sms_service
from greenroom.services.stripe_service import StripeService, get_stripe_service
from greenroom.utils.contact import normalize_phone
from greenroom.utils.logging import get_logger, log_notification_attempt, log_webhook_event

logger = get_logger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"

_CENTS = Decimal("100")
_TWO_PLACES = Decimal("0.01")


def amount_from_cents(value: Any) -> Decimal:
    """Convert Stripe's integer ``amount_total`` to major units."""
    return (Decimal(str(value or 0)) / _CENTS).quantize(_TWO_PLACES)


class WebhookDispatcher:
    """Turns one completed-payment event into customer and admin messages."""

    def __init__(
        self,
        stripe_service: StripeService | None = None,
        email_service: EmailService | None = None,
        sms_service: SmsService | None = None,
        settings: Settings | None = None,
        catalog: Catalog | None = None,
    ) -> None:
        self._stripe = stripe_service or get_stripe_service()
        self._email = email_service or get_email_service()
        self._sms = sms_service or get_sms_service()
        self._settings = settings or get_settings()
        self._catalog = catalog or get_catalog()

    def handle(self, payload: bytes, signature: str | None) -> DispatchReport:
        """Verify a raw webhook delivery and dispatch it.

        Raises:
            SignatureError: If verification fails (no message is sent)
        """
        event = self._stripe.verify_webhook_signature(payload, signature)
        return self.dispatch(event)

    def dispatch(self, event: Mapping[str, Any]) -> DispatchReport:
        """Dispatch an already verified event."""
        event_id = event.get("id")
        event_type = event.get("type")
        log_webhook_event(logger, event_type, event_id, result="received")

        if event_type != CHECKOUT_COMPLETED:
            log_webhook_event(logger, event_type, event_id, result="ignored")
            return DispatchReport(
                event_id=event_id, event_type=event_type, result=ProcessingResult.IGNORED
            )

        session = (event.get("data") or {}).get("object") or {}
        amount = amount_from_cents(session.get("amount_total"))
        metadata = join_metadata_values(session.get("metadata") or {})
        payload = parse_metadata(metadata)
        notification = render(payload, amount, self._catalog)

        attempts = self._fan_out(
            event_id,
            notification,
            admin_copy(notification, amount, metadata),
            email=payload.contact_email,
            phone=normalize_phone(payload.contact_phone),
        )

        failed = [a.channel.value for a in attempts if a.status == DeliveryStatus.FAILED]
        log_webhook_event(
            logger,
            event_type,
            event_id,
            product_type=payload.product_type,
            result=ProcessingResult.SUCCESS.value,
            failed_channels=",".join(failed) or None,
        )
        return DispatchReport(
            event_id=event_id,
            event_type=event_type,
            result=ProcessingResult.SUCCESS,
            product_type=payload.product_type,
            amount=amount,
            attempts=attempts,
        )

    def _fan_out(
        self,
        event_id: str | None,
        notification: Notification,
        admin: Notification,
        *,
        email: str | None,
        phone: str,
    ) -> list[ChannelAttempt]:
        email_ready = self._email.is_configured
        admin_to = self._settings.admin_notify_email

        def send_customer_email() -> str:
            return self._email.send(
                email, notification.subject, notification.html, notification.text
            )

        def send_customer_sms() -> str:
            return self._sms.send(phone, notification.sms)

        def send_admin_email() -> str:
            return self._email.send(admin_to, admin.subject, admin.html, admin.text)

        jobs: list[tuple[NotificationChannel, str | None, Callable[[], str] | None]] = [
            (
                NotificationChannel.CUSTOMER_EMAIL,
                email,
                send_customer_email if email and email_ready else None,
            ),
            (NotificationChannel.CUSTOMER_SMS, phone or None, send_customer_sms if phone else None),
            (
                NotificationChannel.ADMIN_EMAIL,
                admin_to,
                send_admin_email if admin_to and email_ready else None,
            ),
        ]

        runnable = [job for job in jobs if job[2] is not None]
        results: dict[NotificationChannel, ChannelAttempt] = {}
        if runnable:
            with ThreadPoolExecutor(max_workers=len(runnable)) as pool:
                futures = {
                    channel: pool.submit(
                        contextvars.copy_context().run,
                        self._attempt,
                        channel,
                        recipient,
                        send,
                        event_id,
                    )
                    for channel, recipient, send in runnable
                }
                results = {channel: future.result() for channel, future in futures.items()}

        attempts = []
        for channel, recipient, send in jobs:
            if send is None:
                log_notification_attempt(
                    logger, channel.value, DeliveryStatus.SKIPPED.value, event_id=event_id
                )
                attempts.append(
                    ChannelAttempt(channel=channel, status=DeliveryStatus.SKIPPED, recipient=recipient)
                )
            else:
                attempts.append(results[channel])
        return attempts

    def _attempt(
        self,
        channel: NotificationChannel,
        recipient: str | None,
        send: Callable[[], str],
        event_id: str | None,
    ) -> ChannelAttempt:
        try:
            message_id = send()
        except Exception as e:
            # One broken channel must not stop the others
            log_notification_attempt(
                logger,
                channel.value,
                DeliveryStatus.FAILED.value,
                event_id=event_id,
                recipient=recipient,
                error=str(e),
            )
            return ChannelAttempt(
                channel=channel, status=DeliveryStatus.FAILED, recipient=recipient, error=str(e)
            )

        log_notification_attempt(
            logger, channel.value, DeliveryStatus.SENT.value, event_id=event_id, recipient=recipient
        )
        return ChannelAttempt(
            channel=channel, status=DeliveryStatus.SENT, recipient=recipient, message_id=message_id
        )


@lru_cache(maxsize=1)
def get_webhook_dispatcher() -> WebhookDispatcher:
    """Get the shared WebhookDispatcher instance."""
    return WebhookDispatcher()
