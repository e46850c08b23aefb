"""API routes package.

Routers by concern:

- health: Health check
- checkout: Stripe Checkout session creation
- orders: Order validation and the public catalog
- webhooks: Stripe webhook receiver
- uploads: Photo upload relay

All routers are registered in main.py with the /api prefix.
"""

from greenroom_api.routes.checkout import router as checkout_router
from greenroom_api.routes.health import router as health_router
from greenroom_api.routes.orders import router as orders_router
from greenroom_api.routes.uploads import router as uploads_router
from greenroom_api.routes.webhooks import router as webhooks_router

__all__ = [
    "checkout_router",
    "health_router",
    "orders_router",
    "uploads_router",
    "webhooks_router",
]
