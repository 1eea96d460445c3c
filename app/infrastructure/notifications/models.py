"""Notification system core models.

Platform-agnostic models exchanged between the submission dispatcher and
the channel senders. Features render message content, channels handle
delivery and report a ChannelOutcome.

Uses Pydantic BaseModel for runtime validation and JSON serialization.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BodyFormat(Enum):
    """Body format a channel expects from the renderer."""

    HTML = "html"
    TEXT = "text"


class DeliveryKind(Enum):
    """Kind of a single provider call made by a channel."""

    EMAIL = "email"
    TEXT = "text"
    MEDIA = "media"


class ChannelCapabilities(BaseModel):
    """What a channel needs from the dispatcher.

    Attributes:
        requires_durable_url: Attachments must be published before sending
        max_recipients: Upper bound on recipients per send
        body_format: Format the renderer must produce for this channel
    """

    model_config = ConfigDict(frozen=True)

    requires_durable_url: bool
    max_recipients: int = Field(..., ge=1)
    body_format: BodyFormat


class Delivery(BaseModel):
    """Result of one provider call made while sending on a channel.

    Attributes:
        kind: EMAIL, TEXT or MEDIA
        target: Recipient address (one address, or a comma separated list
            for a single email to several inboxes)
        success: Provider accepted the call
        attachment: Filename of the attachment for MEDIA deliveries
        error_code: Redacted error category, present iff the call failed
        external_id: Provider message id (Twilio SID, SMTP Message-ID)
    """

    kind: DeliveryKind
    target: str
    success: bool
    attachment: Optional[str] = None
    error_code: Optional[str] = None
    external_id: Optional[str] = None


class ChannelOutcome(BaseModel):
    """Result of one channel send attempt.

    Created by a channel sender, consumed by the submission dispatcher to
    build the aggregate response. Never persisted.

    Attributes:
        channel: Channel identifier ("email", "chat")
        success: Every delivery on the channel succeeded
        error_code: Redacted error category, present iff ``success`` is False
        deliveries: Per provider call detail

    Example:
        outcome = ChannelOutcome.failed("chat", "TIMEOUT")
        assert not outcome.success
    """

    channel: str
    success: bool
    error_code: Optional[str] = None
    deliveries: List[Delivery] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_error_code(self) -> "ChannelOutcome":
        """Error detail is present iff the outcome is a failure."""
        if self.success and self.error_code is not None:
            raise ValueError("Successful outcome cannot carry an error code")
        if not self.success and not self.error_code:
            raise ValueError("Failed outcome requires an error code")
        return self

    @classmethod
    def from_deliveries(
        cls, channel: str, deliveries: List[Delivery]
    ) -> "ChannelOutcome":
        """Build the outcome of a channel from its deliveries.

        The channel succeeds only if it made at least one call and every
        call succeeded; otherwise the first failure's category is used.
        """
        if not deliveries:
            return cls.failed(channel, "NO_DELIVERIES")
        failures = [d for d in deliveries if not d.success]
        if failures:
            return cls(
                channel=channel,
                success=False,
                error_code=failures[0].error_code or "DELIVERY_FAILED",
                deliveries=deliveries,
            )
        return cls(channel=channel, success=True, deliveries=deliveries)

    @classmethod
    def failed(
        cls,
        channel: str,
        error_code: str,
        deliveries: Optional[List[Delivery]] = None,
    ) -> "ChannelOutcome":
        """Build a failed outcome with an explicit error category."""
        return cls(
            channel=channel,
            success=False,
            error_code=error_code,
            deliveries=deliveries or [],
        )

    @property
    def sent_count(self) -> int:
        return sum(1 for d in self.deliveries if d.success)

    @property
    def failed_count(self) -> int:
        return sum(1 for d in self.deliveries if not d.success)

    def to_public(self) -> Dict[str, Any]:
        """Caller-facing view: categories only, no addresses or provider text."""
        return {
            "channel": self.channel,
            "success": self.success,
            "error": self.error_code,
            "sent": self.sent_count,
            "failed": self.failed_count,
            "deliveries": [
                {
                    "kind": d.kind.value,
                    "attachment": d.attachment,
                    "success": d.success,
                    "error": d.error_code,
                }
                for d in self.deliveries
            ],
        }
