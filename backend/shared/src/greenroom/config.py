"""Environment-driven configuration.

All deployment settings are read from environment variables once and cached.
Secrets that are not present in the environment are resolved lazily from
SSM Parameter Store by the services that need them.

Usage:
    from greenroom.config import get_settings

    settings = get_settings()
    settings.admin_notify_email
"""

import os
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_UPLOAD_MAX_BYTES = 10 * 1024 * 1024


def _clean(value: str | None) -> str | None:
    """Strip whitespace and stray quotes; empty strings become None."""
    if value is None:
        return None
    value = value.strip().strip("'").strip('"')
    return value or None


def _split_csv(value: str | None) -> list[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


class Settings(BaseModel):
    """Deployment settings for the API and the webhook dispatcher."""

    model_config = ConfigDict(frozen=True)

    environment: str = Field(default="dev", description="Deployment environment name")
    aws_region: str = Field(default="us-east-1", description="Default AWS region")

    stripe_secret_key: str | None = Field(
        default=None, description="Stripe secret key (falls back to SSM when unset)"
    )
    stripe_webhook_secret: str | None = Field(
        default=None, description="Stripe webhook signing secret (falls back to SSM)"
    )
    checkout_currency: str = Field(default="usd", description="ISO currency for Checkout")
    site_url: str = Field(
        default="http://localhost:3000",
        description="Public site origin used when the request carries no Origin header",
    )

    ses_from_email: str | None = Field(default=None, description="Verified SES sender")
    ses_region: str | None = Field(default=None, description="SES region override")
    sms_sender_id: str | None = Field(default=None, description="SNS SMS sender ID")
    admin_notify_email: str | None = Field(
        default=None, description="Recipient of admin copies of every confirmation"
    )

    upload_bucket: str | None = Field(default=None, description="S3 bucket for photos")
    upload_folder: str = Field(default="uploads", description="Key prefix for photos")
    upload_public_base_url: str | None = Field(
        default=None, description="Public URL prefix (e.g. CDN) for uploaded photos"
    )
    upload_max_bytes: int = Field(default=DEFAULT_UPLOAD_MAX_BYTES, gt=0)

    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )

    @property
    def ssm_prefix(self) -> str:
        """SSM parameter path prefix for this environment."""
        return f"/greenroom/{self.environment}"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current process environment."""
        env = os.environ
        values: dict = {
            "environment": _clean(env.get("ENVIRONMENT")) or "dev",
            "aws_region": _clean(env.get("AWS_DEFAULT_REGION")) or "us-east-1",
            "stripe_secret_key": _clean(env.get("STRIPE_SECRET_KEY")),
            "stripe_webhook_secret": _clean(env.get("STRIPE_WEBHOOK_SECRET")),
            "checkout_currency": (_clean(env.get("CHECKOUT_CURRENCY")) or "usd").lower(),
            "ses_from_email": _clean(env.get("SES_FROM_EMAIL")),
            "ses_region": _clean(env.get("SES_REGION")),
            "sms_sender_id": _clean(env.get("SMS_SENDER_ID")),
            "admin_notify_email": _clean(env.get("ADMIN_NOTIFY_EMAIL")),
            "upload_bucket": _clean(env.get("UPLOAD_BUCKET")),
            "upload_folder": _clean(env.get("UPLOAD_FOLDER")) or "uploads",
            "upload_public_base_url": _clean(env.get("UPLOAD_PUBLIC_BASE_URL")),
        }
        site_url = _clean(env.get("SITE_URL"))
        if site_url:
            values["site_url"] = site_url.rstrip("/")
        max_bytes = _clean(env.get("UPLOAD_MAX_BYTES"))
        if max_bytes:
            values["upload_max_bytes"] = int(max_bytes)
        origins = _split_csv(env.get("CORS_ALLOW_ORIGINS"))
        if origins:
            values["cors_allow_origins"] = origins
        return cls(**values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the process-wide settings (read once from the environment)."""
    return Settings.from_env()


def reset_settings() -> None:
    """Forget cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
