"""Pydantic models for Green Room orders, checkout and notifications."""

from .checkout import CheckoutRequest, CheckoutSession, ValidationResult, ValidOrder
from .enums import (
    GENERIC_ORDER_TYPE,
    DeliveryStatus,
    NotificationChannel,
    ProcessingResult,
    ProductType,
)
from .errors import (
    ERROR_MESSAGES,
    ERROR_RECOVERY,
    STRIPE_RETRYABLE_ERRORS,
    ErrorCode,
    ErrorResponse,
    FieldError,
    GreenRoomError,
    MetadataTooLargeError,
    OrderValidationError,
    SignatureError,
    TransportError,
    UploadError,
    UpstreamError,
    is_stripe_error_retryable,
)
from .metadata import (
    AfterDarkOrderPayload,
    GenericPayload,
    GuestSummary,
    MembershipPayload,
    MenuLineSummary,
    NotificationPayload,
    OrderPayload,
    ReservationPayload,
    SocialEntryPayload,
    join_metadata_values,
    parse_metadata,
    split_metadata_value,
)
from .notifications import ChannelAttempt, DispatchReport, Notification
from .orders import (
    MembershipDraft,
    MenuLine,
    MenuOrderDraft,
    PersonInfo,
    ProductOrder,
    ReservationDraft,
    SocialEntryDraft,
    parse_order,
)
from .pricing import PriceBreakdown
from .uploads import UploadResult

__all__ = [
    # Enums
    "ProductType",
    "GENERIC_ORDER_TYPE",
    "NotificationChannel",
    "DeliveryStatus",
    "ProcessingResult",
    # Orders
    "PersonInfo",
    "MembershipDraft",
    "ReservationDraft",
    "SocialEntryDraft",
    "MenuLine",
    "MenuOrderDraft",
    "ProductOrder",
    "parse_order",
    # Pricing & checkout
    "PriceBreakdown",
    "ValidationResult",
    "ValidOrder",
    "CheckoutRequest",
    "CheckoutSession",
    # Metadata payloads
    "NotificationPayload",
    "MembershipPayload",
    "ReservationPayload",
    "SocialEntryPayload",
    "AfterDarkOrderPayload",
    "GenericPayload",
    "GuestSummary",
    "MenuLineSummary",
    "OrderPayload",
    "parse_metadata",
    "split_metadata_value",
    "join_metadata_values",
    # Notifications
    "Notification",
    "ChannelAttempt",
    "DispatchReport",
    # Uploads
    "UploadResult",
    # Errors
    "ErrorCode",
    "ERROR_MESSAGES",
    "ERROR_RECOVERY",
    "STRIPE_RETRYABLE_ERRORS",
    "ErrorResponse",
    "FieldError",
    "GreenRoomError",
    "OrderValidationError",
    "MetadataTooLargeError",
    "TransportError",
    "SignatureError",
    "UpstreamError",
    "UploadError",
    "is_stripe_error_retryable",
]
