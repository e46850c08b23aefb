"""Backend services for The Green Room."""

from .catalog import Catalog, MenuItem, get_catalog
from .checkout import CheckoutService, build_checkout_request, get_checkout_service
from .email_service import EmailService, get_email_service
from .media_upload import MediaUploadService, get_media_upload_service
from .pricing import (
    membership_price,
    menu_price,
    price_order,
    reservation_price,
    social_entry_price,
)
from .sms_service import SmsService, get_sms_service
from .ssm_service import SSMService, SSMServiceError, get_ssm_service
from .stripe_service import StripeService, get_stripe_service
from .validation import validate, validate_or_raise
from .webhook_dispatcher import WebhookDispatcher, get_webhook_dispatcher

__all__ = [
    "Catalog",
    "MenuItem",
    "get_catalog",
    "membership_price",
    "reservation_price",
    "social_entry_price",
    "menu_price",
    "price_order",
    "validate",
    "validate_or_raise",
    "build_checkout_request",
    "CheckoutService",
    "get_checkout_service",
    "StripeService",
    "get_stripe_service",
    "SSMService",
    "SSMServiceError",
    "get_ssm_service",
    "EmailService",
    "get_email_service",
    "SmsService",
    "get_sms_service",
    "MediaUploadService",
    "get_media_upload_service",
    "WebhookDispatcher",
    "get_webhook_dispatcher",
]
