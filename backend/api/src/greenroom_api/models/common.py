"""Shared API response models.

Domain models (order drafts, ValidationResult, UploadResult) live in
greenroom.models; this module only covers HTTP-layer concerns.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from greenroom.models.errors import ErrorCode, ErrorResponse

__all__ = [
    "ErrorCode",
    "ErrorResponse",
    "ValidationErrorDetail",
    "ValidationErrorResponse",
    "format_validation_errors",
]


class ValidationErrorDetail(BaseModel):
    """Detail of a single request parsing error."""

    model_config = ConfigDict(strict=True)

    loc: list[str] = Field(
        ...,
        description="Path to the field that failed validation",
        examples=[["body", "product_type"]],
    )
    msg: str = Field(..., description="Human-readable error message", examples=["Field required"])
    type: str = Field(..., description="Error type identifier", examples=["missing"])


class ValidationErrorResponse(BaseModel):
    """Response body for requests that could not be parsed (HTTP 400)."""

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: str = "ERR_VALIDATION"
    message: str = "Request validation failed"
    recovery: str = "Check the request body and try again"
    details: list[ValidationErrorDetail] = Field(default_factory=list)


def format_validation_errors(errors: list[dict[str, Any]]) -> ValidationErrorResponse:
    """Convert pydantic/FastAPI validation errors to a ValidationErrorResponse."""
    details = [
        ValidationErrorDetail(
            loc=[str(loc) for loc in error.get("loc", [])],
            msg=str(error.get("msg", "")),
            type=str(error.get("type", "")),
        )
        for error in errors
    ]
    return ValidationErrorResponse(details=details)
