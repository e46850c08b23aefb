"""Enumeration types for Green Room data models."""

from enum import Enum


class ProductType(str, Enum):
    """Products sold through Stripe Checkout.

    The value doubles as the ``type`` key carried in checkout metadata.
    """

    MEMBERSHIP = "membership"
    RESERVATION = "reservation"
    SOCIAL_ENTRY = "social-entry"
    AFTER_DARK_ORDER = "after-dark-order"


# Metadata ``type`` used when a completed payment carries no product type
GENERIC_ORDER_TYPE = "order"


class NotificationChannel(str, Enum):
    """Outbound channels used after a completed payment."""

    CUSTOMER_EMAIL = "customer_email"
    CUSTOMER_SMS = "customer_sms"
    ADMIN_EMAIL = "admin_email"


class DeliveryStatus(str, Enum):
    """Outcome of a single notification attempt."""

    SENT = "sent"
    SKIPPED = "skipped"  # No recipient or channel not configured
    FAILED = "failed"


class ProcessingResult(str, Enum):
    """Result of handling one webhook event."""

    SUCCESS = "success"
    IGNORED = "ignored"  # Event type we do not act on
