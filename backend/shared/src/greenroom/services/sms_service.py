"""Customer text messages via Amazon SNS direct-to-phone publish."""

import logging
from functools import lru_cache

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from greenroom.config import Settings, get_settings
from greenroom.models.errors import ErrorCode, UpstreamError
from greenroom.utils.contact import normalize_phone

logger = logging.getLogger(__name__)


class SmsService:
    """Publishes transactional SMS to a single phone number."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._client = None

    def _get_client(self):
        if self._client is None:
            self._client = boto3.client("sns", region_name=self._settings.aws_region)
        return self._client

    def _attributes(self) -> dict:
        attributes = {
            "AWS.SNS.SMS.SMSType": {"DataType": "String", "StringValue": "Transactional"},
        }
        if self._settings.sms_sender_id:
            attributes["AWS.SNS.SMS.SenderID"] = {
                "DataType": "String",
                "StringValue": self._settings.sms_sender_id,
            }
        return attributes

    def send(self, to: str, body: str) -> str:
        """Send one SMS.

        Args:
            to: Phone number (normalized to E.164 before sending)
            body: Message text

        Returns:
            SNS message ID

        Raises:
            UpstreamError: If the number is unusable or SNS rejects the message.
        """
        phone = normalize_phone(to)
        if not phone.startswith("+"):
            raise UpstreamError(
                ErrorCode.SMS_DELIVERY_FAILED, details={"reason": "Phone number is not E.164"}
            )

        try:
            response = self._get_client().publish(
                PhoneNumber=phone,
                Message=body,
                MessageAttributes=self._attributes(),
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to send SMS to %s...: %s", phone[:6], e)
            raise UpstreamError(ErrorCode.SMS_DELIVERY_FAILED, details={"reason": str(e)}) from e

        message_id = response["MessageId"]
        logger.info("Sent SMS to %s... (message %s)", phone[:6], message_id)
        return message_id


@lru_cache(maxsize=1)
def get_sms_service() -> SmsService:
    """Get the shared SmsService instance."""
    return SmsService()
