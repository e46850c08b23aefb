"""Health check endpoint."""

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter

from greenroom import __version__

router = APIRouter(tags=["health"])


@router.get("/health", summary="Service health check")
async def health() -> dict[str, Any]:
    return {
        "status": "healthy",
        "service": "greenroom-api",
        "version": __version__,
        "timestamp": datetime.now(UTC).isoformat(),
    }
