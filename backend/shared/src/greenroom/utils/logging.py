"""Structured logging utilities with correlation ID support.

Provides:
- Correlation ID context management for request tracing
- Structured logging formatter for consistent log output
- Helper functions for checkout, webhook and notification logging

Usage:
    from greenroom.utils.logging import get_logger, set_correlation_id

    # In middleware/request handler:
    set_correlation_id(request.headers.get("X-Correlation-ID"))

    # In service code:
    logger = get_logger(__name__)
    logger.info("Starting checkout", extra={"product_type": "reservation"})
"""

import logging
import uuid
from contextvars import ContextVar
from typing import Any

# Context variable for correlation ID - thread-safe and async-safe
_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def generate_correlation_id() -> str:
    """Generate a new correlation ID.

    Returns:
        UUID-based correlation ID string
    """
    return str(uuid.uuid4())


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Set the correlation ID for the current request context.

    Args:
        correlation_id: Optional existing correlation ID. If None, generates new one.

    Returns:
        The correlation ID that was set
    """
    cid = correlation_id or generate_correlation_id()
    _correlation_id.set(cid)
    return cid


def get_correlation_id() -> str | None:
    """Get the current correlation ID."""
    return _correlation_id.get()


def clear_correlation_id() -> None:
    """Clear the correlation ID context."""
    _correlation_id.set(None)


class CorrelationIdFilter(logging.Filter):
    """Logging filter that adds correlation_id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "no-correlation-id"
        return True


class StructuredFormatter(logging.Formatter):
    """Formatter for structured log output with correlation ID."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with a correlation ID prefix.

        Args:
            record: Log record to format

        Returns:
            Formatted log string
        """
        if not hasattr(record, "correlation_id"):
            record.correlation_id = get_correlation_id() or "no-correlation-id"

        base = super().format(record)

        # Prefix for easy grep/filtering
        return f"[{record.correlation_id}] {base}"


def get_logger(name: str) -> logging.Logger:
    """Get a logger with correlation ID support.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not any(isinstance(f, CorrelationIdFilter) for f in logger.filters):
        logger.addFilter(CorrelationIdFilter())

    return logger


def configure_logging(level: int = logging.INFO) -> None:
    """Install the structured formatter on the root logger.

    Safe to call more than once; an existing structured handler is reused.
    """
    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers:
        if isinstance(handler.formatter, StructuredFormatter):
            return
    handler = logging.StreamHandler()
    handler.setFormatter(
        StructuredFormatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    handler.addFilter(CorrelationIdFilter())
    root.addHandler(handler)


def _emit(logger: logging.Logger, level: int, parts: list[str], context: dict[str, Any]) -> None:
    logger.log(level, " | ".join(parts), extra={"context": context})


def log_checkout_operation(
    logger: logging.Logger,
    operation: str,
    *,
    product_type: str | None = None,
    amount_cents: int | None = None,
    session_id: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log a checkout operation with structured context.

    Args:
        logger: Logger instance
        operation: Operation name (e.g., "create_checkout_session")
        product_type: Product being purchased
        amount_cents: Amount in cents if relevant
        session_id: Stripe Checkout session ID if available
        error: Error message if operation failed
        **extra: Additional context fields
    """
    context: dict[str, Any] = {"operation": operation}

    if product_type:
        context["product_type"] = product_type
    if amount_cents is not None:
        context["amount_cents"] = amount_cents
    if session_id:
        context["session_id"] = session_id
    if error:
        context["error"] = error

    context.update(extra)

    msg_parts = [f"Checkout operation: {operation}"]
    for key, value in context.items():
        if key != "operation":
            msg_parts.append(f"{key}={value}")

    _emit(logger, logging.ERROR if error else logging.INFO, msg_parts, context)


def log_webhook_event(
    logger: logging.Logger,
    event_type: str | None,
    event_id: str | None,
    *,
    product_type: str | None = None,
    result: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log a webhook event with structured context.

    Args:
        logger: Logger instance
        event_type: Stripe event type (e.g., "checkout.session.completed")
        event_id: Stripe event ID
        product_type: Product type from the event metadata if available
        result: Processing result (received, success, ignored, error)
        error: Error message if processing failed
        **extra: Additional context fields
    """
    context: dict[str, Any] = {
        "event_type": event_type,
        "event_id": event_id,
    }

    if product_type:
        context["product_type"] = product_type
    if result:
        context["result"] = result
    if error:
        context["error"] = error

    context.update(extra)

    msg_parts = [f"Webhook event: {event_type} ({event_id})"]
    if result:
        msg_parts.append(f"result={result}")
    if product_type:
        msg_parts.append(f"product={product_type}")
    if error:
        msg_parts.append(f"error={error}")

    if result == "error":
        level = logging.ERROR
    elif result == "ignored":
        level = logging.WARNING
    else:
        level = logging.INFO
    _emit(logger, level, msg_parts, context)


def log_notification_attempt(
    logger: logging.Logger,
    channel: str,
    status: str,
    *,
    event_id: str | None = None,
    recipient: str | None = None,
    error: str | None = None,
) -> None:
    """Log one notification channel attempt.

    Recipients are truncated so full addresses do not land in logs.
    """
    context: dict[str, Any] = {"channel": channel, "status": status}
    if event_id:
        context["event_id"] = event_id
    if recipient:
        context["recipient"] = recipient[:20]
    if error:
        context["error"] = error

    msg_parts = [f"Notification: {channel}", f"status={status}"]
    if recipient:
        msg_parts.append(f"to={recipient[:20]}...")
    if error:
        msg_parts.append(f"error={error}")

    _emit(logger, logging.ERROR if status == "failed" else logging.INFO, msg_parts, context)
