"""FastAPI application for The Green Room.

Endpoints (all under /api):
- Health checks
- Checkout session creation and order validation
- Stripe webhook receiver
- Photo upload relay
"""

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from mangum import Mangum

from greenroom import __version__
from greenroom.config import get_settings
from greenroom.utils.logging import configure_logging
from greenroom_api.exceptions import register_exception_handlers
from greenroom_api.middleware.correlation import CorrelationIdMiddleware
from greenroom_api.routes.checkout import router as checkout_router
from greenroom_api.routes.health import router as health_router
from greenroom_api.routes.orders import router as orders_router
from greenroom_api.routes.uploads import router as uploads_router
from greenroom_api.routes.webhooks import router as webhooks_router

configure_logging(logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="The Green Room API",
    description="Checkout, payment webhook and photo upload endpoints",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(CorrelationIdMiddleware)

register_exception_handlers(app)

# CloudFront routes /api/* to API Gateway
app.include_router(health_router, prefix="/api")
app.include_router(checkout_router, prefix="/api")
app.include_router(orders_router, prefix="/api")
app.include_router(webhooks_router, prefix="/api")
app.include_router(uploads_router, prefix="/api")


@app.get("/api/ping")
async def ping() -> dict[str, Any]:
    """Root health check endpoint at /api/ping."""
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat(),
        "service": "greenroom-api",
    }


# Lambda handler - Mangum wraps FastAPI for AWS Lambda + API Gateway
handler = Mangum(app, lifespan="off")


def run_server(host: str = "0.0.0.0", port: int = 8080, reload: bool = True) -> None:
    """Run the API locally with uvicorn.

    Args:
        host: Host to bind to
        port: Port to listen on
        reload: Enable hot reload for development
    """
    import uvicorn

    if reload:
        # Reload mode needs an import string
        uvicorn.run(
            "greenroom_api.main:app",
            host=host,
            port=port,
            reload=True,
            reload_dirs=["api/src", "shared/src"],
        )
    else:
        uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
