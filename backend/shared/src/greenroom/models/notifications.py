"""Rendered notifications and webhook dispatch reports."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from greenroom.models.enums import DeliveryStatus, NotificationChannel, ProcessingResult


class Notification(BaseModel):
    """One rendered confirmation: email subject/bodies and the SMS text."""

    model_config = ConfigDict(frozen=True)

    subject: str
    html: str
    text: str
    sms: str


class ChannelAttempt(BaseModel):
    """Outcome of sending on one channel."""

    model_config = ConfigDict(frozen=True)

    channel: NotificationChannel
    status: DeliveryStatus
    recipient: Optional[str] = None
    message_id: Optional[str] = None
    error: Optional[str] = None


class DispatchReport(BaseModel):
    """What the dispatcher did with one webhook event."""

    model_config = ConfigDict(frozen=True)

    event_id: Optional[str] = None
    event_type: Optional[str] = None
    result: ProcessingResult
    product_type: Optional[str] = None
    amount: Optional[Decimal] = None
    attempts: list[ChannelAttempt] = Field(default_factory=list)

    def attempt(self, channel: NotificationChannel) -> Optional[ChannelAttempt]:
        """Return the attempt for a channel, if one was made."""
        for item in self.attempts:
            if item.channel == channel:
                return item
        return None
