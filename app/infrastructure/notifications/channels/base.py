"""Notification channel abstract base class.

All channel implementations (Email, Chat) must implement this interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from infrastructure.attachments.models import Attachment
from infrastructure.notifications.models import ChannelCapabilities, ChannelOutcome
from infrastructure.operations import OperationResult


class NotificationChannel(ABC):
    """Abstract base class for notification channels.

    Each channel handles delivery through a specific provider:
    - EmailChannel: SMTP mailbox
    - ChatChannel: Twilio WhatsApp

    Channels declare what they need from the dispatcher through
    ``capabilities()``, so the dispatcher never branches on channel names.

    Example Implementation:
        class ChatChannel(NotificationChannel):

            @property
            def channel_name(self) -> str:
                return "chat"

            def send(self, recipients, body, attachments, subject=None, text_body=None):
                deliveries = []
                for recipient in recipients:
                    deliveries.append(self._send_text(recipient, body))
                return ChannelOutcome.from_deliveries("chat", deliveries)
    """

    @property
    @abstractmethod
    def channel_name(self) -> str:
        """Channel identifier (email, chat).

        Returns:
            Channel name string for routing and logging
        """
        pass

    @abstractmethod
    def capabilities(self) -> ChannelCapabilities:
        """Static description of what the channel needs.

        Returns:
            ChannelCapabilities (durable URLs, recipient limit, body format)
        """
        pass

    @abstractmethod
    def send(
        self,
        recipients: Sequence[str],
        body: str,
        attachments: Sequence[Attachment],
        subject: Optional[str] = None,
        text_body: Optional[str] = None,
    ) -> ChannelOutcome:
        """Deliver a rendered body and its attachments to all recipients.

        Must never raise: provider errors are returned as a failed
        ChannelOutcome carrying a redacted error code.

        Args:
            recipients: Configured recipient addresses for this channel
            body: Body already rendered in ``capabilities().body_format``
            attachments: Staged attachments; channels that require durable
                URLs read ``published_url`` / ``publish_error``
            subject: Subject line, for channels that have one
            text_body: Plain text rendering, for channels whose body format
                is richer and that carry a text alternative

        Returns:
            ChannelOutcome for this channel

        Example:
            outcome = channel.send(["ops@example.com"], body, attachments)
            if not outcome.success:
                logger.warning("channel_failed", error_code=outcome.error_code)
        """
        pass

    @abstractmethod
    def resolve_recipient(self, recipient: str) -> OperationResult:
        """Normalize a configured recipient into the provider's address format.

        Examples:
        - EmailChannel: validates the mailbox syntax
        - ChatChannel: "+919876543210" -> "whatsapp:+919876543210"

        Args:
            recipient: Address as configured

        Returns:
            OperationResult with the address in data["address"]
            - Success: OperationResult(status=SUCCESS, data={"address": ...})
            - Invalid: OperationResult(status=PERMANENT_ERROR, error_code="INVALID_RECIPIENT")
        """
        pass

    @abstractmethod
    def health_check(self) -> OperationResult:
        """Check channel health (provider connectivity, credentials).

        Returns:
            OperationResult indicating channel health
            - Success: provider reachable, credentials valid
            - Failure: provider unreachable or credentials invalid
        """
        pass
