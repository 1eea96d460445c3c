"""Chat channel implementation using Twilio WhatsApp messaging."""

import re
from typing import List, Optional, Sequence

from requests.exceptions import RequestException
from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from infrastructure.attachments.models import Attachment
from infrastructure.logging import get_module_logger
from infrastructure.notifications.channels.base import NotificationChannel
from infrastructure.notifications.errors import ChannelSendError
from infrastructure.notifications.models import (
    BodyFormat,
    ChannelCapabilities,
    ChannelOutcome,
    Delivery,
    DeliveryKind,
)
from infrastructure.operations import OperationResult
from infrastructure.operations.classifiers import classify_twilio_error

logger = get_module_logger()

WHATSAPP_PREFIX = "whatsapp:"
E164_PATTERN = re.compile(r"^\+[1-9]\d{6,14}$")

# Twilio rejects WhatsApp bodies longer than this
MAX_BODY_LENGTH = 1600


class ChatChannel(NotificationChannel):
    """Twilio WhatsApp notification channel.

    For every recipient sends the text body first, then one media message
    per published attachment. Twilio fetches media from a public URL, so
    this channel requires durable URLs.
    """

    def __init__(self, client: Optional[Client], from_identity: str):
        """Initialize WhatsApp chat channel.

        Args:
            client: Twilio REST client, None when credentials are missing.
            from_identity: Sender identity ("whatsapp:+14155238886").
        """
        self._client = client
        self._from = from_identity
        logger.info(
            "initialized_chat_channel",
            backend="twilio_whatsapp",
            configured=client is not None,
        )

    @property
    def channel_name(self) -> str:
        """Channel identifier."""
        return "chat"

    def capabilities(self) -> ChannelCapabilities:
        return ChannelCapabilities(
            requires_durable_url=True,
            max_recipients=5,
            body_format=BodyFormat.TEXT,
        )

    def send(
        self,
        recipients: Sequence[str],
        body: str,
        attachments: Sequence[Attachment],
        subject: Optional[str] = None,
        text_body: Optional[str] = None,
    ) -> ChannelOutcome:
        """Send the text body and each attachment to every recipient.

        Args:
            recipients: Configured WhatsApp identities.
            body: Rendered text body.
            attachments: Attachments carrying ``published_url`` or
                ``publish_error``.
            subject: Unused, WhatsApp messages have no subject.
            text_body: Unused, ``body`` is already plain text.

        Returns:
            ChannelOutcome with one TEXT and one MEDIA delivery per
            attachment for each recipient.
        """
        if self._client is None:
            logger.error("chat_channel_not_configured")
            return ChannelOutcome.failed(self.channel_name, "NOT_CONFIGURED")

        if len(body) > MAX_BODY_LENGTH:
            logger.warning("chat_body_truncated", length=len(body))
            body = body[: MAX_BODY_LENGTH - 3] + "..."

        deliveries: List[Delivery] = []
        for recipient in recipients:
            resolved = self.resolve_recipient(recipient)
            if not resolved.is_success:
                logger.warning("chat_recipient_rejected", error=resolved.message)
                deliveries.append(
                    Delivery(
                        kind=DeliveryKind.TEXT,
                        target=recipient,
                        success=False,
                        error_code=resolved.error_code,
                    )
                )
                continue

            address = resolved.data["address"]
            deliveries.append(
                self._deliver(DeliveryKind.TEXT, address, body=body)
            )
            for attachment in attachments:
                if not attachment.published_url:
                    deliveries.append(
                        Delivery(
                            kind=DeliveryKind.MEDIA,
                            target=address,
                            attachment=attachment.filename,
                            success=False,
                            error_code=attachment.publish_error or "NO_DURABLE_URL",
                        )
                    )
                    continue
                deliveries.append(
                    self._deliver(
                        DeliveryKind.MEDIA,
                        address,
                        media_url=[attachment.published_url],
                        attachment=attachment.filename,
                    )
                )

        if not deliveries:
            return ChannelOutcome.failed(self.channel_name, "NO_RECIPIENTS")
        return ChannelOutcome.from_deliveries(self.channel_name, deliveries)

    def resolve_recipient(self, recipient: str) -> OperationResult:
        """Normalize a phone number into a WhatsApp identity.

        Args:
            recipient: "+919876543210" or "whatsapp:+919876543210".

        Returns:
            OperationResult with the identity in data["address"].
        """
        number = recipient.strip()
        if number.startswith(WHATSAPP_PREFIX):
            number = number[len(WHATSAPP_PREFIX):]
        number = number.replace(" ", "").replace("-", "")
        if not E164_PATTERN.match(number):
            return OperationResult.permanent(
                message=f"Not an E.164 phone number: {recipient!r}",
                error_code="INVALID_RECIPIENT",
            )
        return OperationResult.success(
            message="WhatsApp identity resolved",
            data={"address": f"{WHATSAPP_PREFIX}{number}"},
        )

    def health_check(self) -> OperationResult:
        """Check Twilio API connectivity and credentials.

        Returns:
            OperationResult indicating channel health.
        """
        if self._client is None:
            return OperationResult.permanent(
                message="Twilio credentials are not configured",
                error_code="NOT_CONFIGURED",
            )
        try:
            account = self._client.api.v2010.accounts(self._client.account_sid).fetch()
        except (TwilioException, RequestException) as e:
            return classify_twilio_error(e)
        return OperationResult.success(
            message="Twilio API reachable", data={"status": account.status}
        )

    def _deliver(
        self,
        kind: DeliveryKind,
        address: str,
        attachment: Optional[str] = None,
        **payload,
    ) -> Delivery:
        try:
            sid = self._create_message(address, **payload)
        except ChannelSendError as e:
            logger.error(
                "whatsapp_message_failed",
                kind=kind.value,
                attachment=attachment,
                error_code=e.error_code,
                error=str(e),
            )
            return Delivery(
                kind=kind,
                target=address,
                attachment=attachment,
                success=False,
                error_code=e.error_code,
            )
        logger.info(
            "whatsapp_message_sent", kind=kind.value, attachment=attachment, sid=sid
        )
        return Delivery(
            kind=kind,
            target=address,
            attachment=attachment,
            success=True,
            external_id=sid,
        )

    def _create_message(self, address: str, **payload) -> str:
        try:
            message = self._client.messages.create(
                from_=self._from, to=address, **payload
            )
        except (TwilioException, RequestException) as e:
            result = classify_twilio_error(e)
            raise ChannelSendError(result.message, error_code=result.error_category) from e
        return message.sid
