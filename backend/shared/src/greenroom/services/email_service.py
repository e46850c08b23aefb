"""Transactional email via Amazon SES."""

import logging
from functools import lru_cache

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from greenroom.config import Settings, get_settings
from greenroom.models.errors import ErrorCode, UpstreamError

logger = logging.getLogger(__name__)


class EmailService:
    """Sends HTML + text email through SES ``send_email``.

    Usage:
        email = get_email_service()
        if email.is_configured:
            email.send("guest@example.com", "Subject", "<p>Hi</p>", "Hi")
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._client = None

    @property
    def is_configured(self) -> bool:
        """True when a verified sender address is configured."""
        return bool(self._settings.ses_from_email)

    def _get_client(self):
        if self._client is None:
            region = self._settings.ses_region or self._settings.aws_region
            self._client = boto3.client("ses", region_name=region)
        return self._client

    def send(self, to: str, subject: str, html: str, text: str) -> str:
        """Send one email.

        Args:
            to: Recipient address
            subject: Subject line
            html: HTML body
            text: Plain-text body

        Returns:
            SES message ID

        Raises:
            UpstreamError: If no sender is configured or SES rejects the message.
        """
        if not self.is_configured:
            raise UpstreamError(
                ErrorCode.CONFIGURATION_MISSING, details={"setting": "SES_FROM_EMAIL"}
            )

        try:
            response = self._get_client().send_email(
                Source=self._settings.ses_from_email,
                Destination={"ToAddresses": [to]},
                Message={
                    "Subject": {"Data": subject, "Charset": "UTF-8"},
                    "Body": {
                        "Text": {"Data": text, "Charset": "UTF-8"},
                        "Html": {"Data": html, "Charset": "UTF-8"},
                    },
                },
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to send email to %s...: %s", to[:20], e)
            raise UpstreamError(ErrorCode.EMAIL_DELIVERY_FAILED, details={"reason": str(e)}) from e

        message_id = response["MessageId"]
        logger.info("Sent email to %s... (message %s)", to[:20], message_id)
        return message_id


@lru_cache(maxsize=1)
def get_email_service() -> EmailService:
    """Get the shared EmailService instance."""
    return EmailService()
