"""Standard error codes and exceptions for the Green Room backend.

Error taxonomy:
- OrderValidationError: ineligible order, resolved before any external call
- MetadataTooLargeError: order details exceed Stripe metadata limits
- TransportError: Stripe/network failure on the checkout path
- SignatureError: webhook authentication failure (untrusted event)
- UpstreamError: image store or messaging provider failure
- UploadError: rejected upload (missing, too large, not an image)
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Standard error codes returned in error responses."""

    # Order error codes (ERR_ORDER_001-ERR_ORDER_002)
    ORDER_NOT_ELIGIBLE = "ERR_ORDER_001"
    ORDER_TOO_LARGE = "ERR_ORDER_002"

    # Stripe/Payment error codes (ERR_STRIPE_001-ERR_STRIPE_003)
    INVALID_WEBHOOK_SIGNATURE = "ERR_STRIPE_001"
    STRIPE_API_ERROR = "ERR_STRIPE_002"
    CHECKOUT_URL_MISSING = "ERR_STRIPE_003"

    # Upload error codes (ERR_UPLOAD_001-ERR_UPLOAD_004)
    UPLOAD_MISSING_FILE = "ERR_UPLOAD_001"
    UPLOAD_TOO_LARGE = "ERR_UPLOAD_002"
    UPLOAD_NOT_IMAGE = "ERR_UPLOAD_003"
    UPLOAD_FAILED = "ERR_UPLOAD_004"

    # Messaging error codes (ERR_NOTIFY_001-ERR_NOTIFY_002)
    EMAIL_DELIVERY_FAILED = "ERR_NOTIFY_001"
    SMS_DELIVERY_FAILED = "ERR_NOTIFY_002"

    CONFIGURATION_MISSING = "ERR_CONFIG_001"


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.ORDER_NOT_ELIGIBLE: "The order is missing required information",
    ErrorCode.ORDER_TOO_LARGE: "The order has too much detail to send for payment",
    ErrorCode.INVALID_WEBHOOK_SIGNATURE: "Invalid webhook signature",
    ErrorCode.STRIPE_API_ERROR: "Could not start payment",
    ErrorCode.CHECKOUT_URL_MISSING: "Could not start payment",
    ErrorCode.UPLOAD_MISSING_FILE: "No file was uploaded",
    ErrorCode.UPLOAD_TOO_LARGE: "The uploaded file is too large",
    ErrorCode.UPLOAD_NOT_IMAGE: "The uploaded file is not an image",
    ErrorCode.UPLOAD_FAILED: "Cloud upload failed",
    ErrorCode.EMAIL_DELIVERY_FAILED: "Failed to send email",
    ErrorCode.SMS_DELIVERY_FAILED: "Failed to send text message",
    ErrorCode.CONFIGURATION_MISSING: "Required configuration is missing",
}

# Recovery suggestions shown to the caller
ERROR_RECOVERY: dict[ErrorCode, str] = {
    ErrorCode.ORDER_NOT_ELIGIBLE: "Complete the highlighted fields and try again",
    ErrorCode.ORDER_TOO_LARGE: "Shorten notes or other free-text answers and try again",
    ErrorCode.INVALID_WEBHOOK_SIGNATURE: "Verify webhook secret configuration",
    ErrorCode.STRIPE_API_ERROR: "Please try again",
    ErrorCode.CHECKOUT_URL_MISSING: "Please try again",
    ErrorCode.UPLOAD_MISSING_FILE: "Attach a photo and try again",
    ErrorCode.UPLOAD_TOO_LARGE: "Upload a smaller photo (10MB max)",
    ErrorCode.UPLOAD_NOT_IMAGE: "Upload a JPEG, PNG or other image file",
    ErrorCode.UPLOAD_FAILED: "Try again in a moment",
    ErrorCode.EMAIL_DELIVERY_FAILED: "Verify the sender identity and recipient address",
    ErrorCode.SMS_DELIVERY_FAILED: "Verify the phone number and SMS settings",
    ErrorCode.CONFIGURATION_MISSING: "Set the missing environment variable or SSM parameter",
}


class FieldError(BaseModel):
    """A single failed eligibility rule, keyed by the offending field."""

    model_config = ConfigDict(frozen=True)

    field: str
    message: str


class ErrorResponse(BaseModel):
    """Standard error body returned by the API."""

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: ErrorCode
    message: str
    recovery: str
    details: Optional[dict[str, str]] = None
    field_errors: Optional[list[FieldError]] = None

    @classmethod
    def from_code(
        cls,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
        field_errors: Optional[list[FieldError]] = None,
    ) -> "ErrorResponse":
        """Create an ErrorResponse from an error code.

        Args:
            code: The error code
            details: Optional additional context about the error
            field_errors: Optional per-field validation failures

        Returns:
            An ErrorResponse with the message and recovery hint for the code.
        """
        return cls(
            error_code=code,
            message=ERROR_MESSAGES[code],
            recovery=ERROR_RECOVERY[code],
            details=details,
            field_errors=field_errors,
        )


class GreenRoomError(Exception):
    """Base exception for domain errors.

    Can be caught and converted to an ErrorResponse for API responses.
    """

    def __init__(
        self,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ):
        self.code = code
        self.message = ERROR_MESSAGES[code]
        self.recovery = ERROR_RECOVERY[code]
        self.details = details
        super().__init__(self.message)

    def to_error_response(self) -> ErrorResponse:
        """Convert this exception to an ErrorResponse."""
        return ErrorResponse.from_code(self.code, self.details)


class OrderValidationError(GreenRoomError):
    """Raised when an order is not eligible for checkout."""

    def __init__(self, errors: list[FieldError], product_type: str | None = None):
        details = {"product_type": product_type} if product_type else None
        super().__init__(ErrorCode.ORDER_NOT_ELIGIBLE, details)
        self.errors = list(errors)

    def to_error_response(self) -> ErrorResponse:
        return ErrorResponse.from_code(self.code, self.details, self.errors)


class MetadataTooLargeError(GreenRoomError):
    """Raised when an order does not fit in Stripe checkout metadata."""

    def __init__(self, key_count: int, max_keys: int):
        super().__init__(
            ErrorCode.ORDER_TOO_LARGE, {"keys": str(key_count), "max_keys": str(max_keys)}
        )


class TransportError(GreenRoomError):
    """Raised when talking to the payment provider fails."""

    def __init__(
        self,
        code: ErrorCode = ErrorCode.STRIPE_API_ERROR,
        details: Optional[dict[str, str]] = None,
        stripe_error_code: str | None = None,
    ):
        super().__init__(code, details)
        self.stripe_error_code = stripe_error_code


class SignatureError(GreenRoomError):
    """Raised when a webhook payload fails signature verification."""

    def __init__(self, reason: str = "Invalid webhook signature"):
        super().__init__(ErrorCode.INVALID_WEBHOOK_SIGNATURE, {"message": reason})


class UpstreamError(GreenRoomError):
    """Raised when the image store or a messaging provider fails."""


class UploadError(GreenRoomError):
    """Raised when an uploaded file is rejected before reaching the store."""


# Stripe error codes that indicate the user should retry
STRIPE_RETRYABLE_ERRORS: set[str] = {
    "processing_error",
    "rate_limit",
    "lock_timeout",
    "api_connection_error",
}


def is_stripe_error_retryable(stripe_error_code: Optional[str]) -> bool:
    """Check if a Stripe error is likely transient and retryable.

    Args:
        stripe_error_code: The Stripe error code.

    Returns:
        True if the error may be resolved by retrying.
    """
    return stripe_error_code in STRIPE_RETRYABLE_ERRORS if stripe_error_code else False
