"""FastAPI dependency providers for shared services.

Services are lazily instantiated and cached with @lru_cache in their own
modules; this module re-exposes them for ``Depends`` and gives tests one
place to reset everything.

Usage in routes:
    from greenroom_api.dependencies import get_checkout_service

    @router.post("/checkout")
    def create_checkout(
        order: ProductOrder,
        checkout: CheckoutService = Depends(get_checkout_service),
    ):
        ...

Service Dependency Graph:
    Settings (get_settings)
        ├── StripeService ── SSMService (only when a secret is not in the env)
        │       ├── CheckoutService
        │       └── WebhookDispatcher ── EmailService, SmsService
        └── MediaUploadService

Testing:
    Use reset_services() to clear cached instances between tests, or
    app.dependency_overrides to swap in mocks.
"""

from greenroom.config import reset_settings
from greenroom.services.catalog import Catalog, get_catalog
from greenroom.services.checkout import CheckoutService, get_checkout_service
from greenroom.services.email_service import get_email_service
from greenroom.services.media_upload import MediaUploadService, get_media_upload_service
from greenroom.services.sms_service import get_sms_service
from greenroom.services.ssm_service import get_ssm_service
from greenroom.services.stripe_service import get_stripe_service
from greenroom.services.webhook_dispatcher import WebhookDispatcher, get_webhook_dispatcher

__all__ = [
    "Catalog",
    "CheckoutService",
    "MediaUploadService",
    "WebhookDispatcher",
    "get_catalog",
    "get_checkout_service",
    "get_media_upload_service",
    "get_webhook_dispatcher",
    "reset_services",
]


def reset_services() -> None:
    """Clear all cached service instances and settings.

    Example:
        @pytest.fixture(autouse=True)
        def reset_state():
            yield
            reset_services()
    """
    get_checkout_service.cache_clear()
    get_webhook_dispatcher.cache_clear()
    get_media_upload_service.cache_clear()
    get_stripe_service.cache_clear()
    get_email_service.cache_clear()
    get_sms_service.cache_clear()
    get_ssm_service.cache_clear()
    get_catalog.cache_clear()
    reset_settings()
