"""FastAPI exception handlers for converting GreenRoomError to HTTP responses.

The ErrorCode-to-HTTP status mapping:
- 400 Bad Request: ineligible orders, bad signatures, rejected uploads,
  unparseable request bodies
- 500 Internal Server Error: image store, messaging or configuration failures
- 502 Bad Gateway: Stripe failures on the checkout path (retry prompt)

Usage:
    from greenroom_api.exceptions import register_exception_handlers
    register_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_502_BAD_GATEWAY,
)

from greenroom.models.errors import ErrorCode, GreenRoomError
from greenroom_api.models.common import format_validation_errors

logger = logging.getLogger(__name__)

ERROR_CODE_TO_HTTP_STATUS: dict[ErrorCode, int] = {
    # Client-side problems -> 400
    ErrorCode.ORDER_NOT_ELIGIBLE: HTTP_400_BAD_REQUEST,
    ErrorCode.ORDER_TOO_LARGE: HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_WEBHOOK_SIGNATURE: HTTP_400_BAD_REQUEST,
    ErrorCode.UPLOAD_MISSING_FILE: HTTP_400_BAD_REQUEST,
    ErrorCode.UPLOAD_TOO_LARGE: HTTP_400_BAD_REQUEST,
    ErrorCode.UPLOAD_NOT_IMAGE: HTTP_400_BAD_REQUEST,
    # Payment provider unreachable or misbehaving -> 502
    ErrorCode.STRIPE_API_ERROR: HTTP_502_BAD_GATEWAY,
    ErrorCode.CHECKOUT_URL_MISSING: HTTP_502_BAD_GATEWAY,
    # Our own dependencies -> 500
    ErrorCode.UPLOAD_FAILED: HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.EMAIL_DELIVERY_FAILED: HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.SMS_DELIVERY_FAILED: HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.CONFIGURATION_MISSING: HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_http_status_for_error(code: ErrorCode) -> int:
    """Get the HTTP status for an ErrorCode (400 if not mapped)."""
    return ERROR_CODE_TO_HTTP_STATUS.get(code, HTTP_400_BAD_REQUEST)


async def greenroom_error_handler(request: Request, exc: GreenRoomError) -> JSONResponse:
    """Convert a domain error into the standard error body."""
    status_code = get_http_status_for_error(exc.code)
    if status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s on %s: %s %s", exc.code.value, request.url.path, exc.message, exc.details)
    else:
        logger.info("%s on %s: %s", exc.code.value, request.url.path, exc.message)

    return JSONResponse(
        status_code=status_code,
        content=exc.to_error_response().model_dump(mode="json"),
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report unparseable request bodies as 400 with per-field details."""
    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content=format_validation_errors(list(exc.errors())).model_dump(mode="json"),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions with a generic 500 body.

    Internal details are logged, never returned.
    """
    logger.exception("Unhandled exception on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error_code": "ERR_INTERNAL",
            "message": "An unexpected error occurred",
            "recovery": "Please try again later or contact support",
            "details": None,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(GreenRoomError, greenroom_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
