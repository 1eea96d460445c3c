"""Email channel implementation using an SMTP mailbox."""

import smtplib
from email.errors import MessageError
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from typing import Dict, List, Optional, Sequence

from pydantic import EmailStr, TypeAdapter, ValidationError

from infrastructure.attachments.models import Attachment
from infrastructure.configuration.integrations import SmtpSettings
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
from infrastructure.operations.classifiers import classify_smtp_error

logger = get_module_logger()

_email_adapter = TypeAdapter(EmailStr)

# Only used when the caller has no text rendering of the body
PLAIN_TEXT_FALLBACK = "This message contains an HTML car submission summary."


class EmailChannel(NotificationChannel):
    """SMTP email notification channel.

    Sends one HTML message to the whole recipient list with every staged
    file attached inline, so it never needs published URLs.
    """

    def __init__(self, smtp_settings: SmtpSettings, timeout: float = 20.0):
        """Initialize SMTP email channel.

        Args:
            smtp_settings: Host, port, TLS flag and mailbox credentials.
            timeout: Socket timeout in seconds for every SMTP operation.
        """
        self._settings = smtp_settings
        self._timeout = timeout
        logger.info(
            "initialized_email_channel",
            backend="smtp",
            host=smtp_settings.SMTP_HOST,
            sender=smtp_settings.EMAIL_USER,
        )

    @property
    def channel_name(self) -> str:
        """Channel identifier."""
        return "email"

    def capabilities(self) -> ChannelCapabilities:
        return ChannelCapabilities(
            requires_durable_url=False,
            max_recipients=50,
            body_format=BodyFormat.HTML,
        )

    def send(
        self,
        recipients: Sequence[str],
        body: str,
        attachments: Sequence[Attachment],
        subject: Optional[str] = None,
        text_body: Optional[str] = None,
    ) -> ChannelOutcome:
        """Send the HTML body to all recipients in a single message.

        Addresses that fail validation, and addresses the server refuses
        while accepting others, are recorded as failed EMAIL deliveries so
        the outcome fails even though the message went out.

        Args:
            recipients: Configured inbox addresses.
            body: Rendered HTML body.
            attachments: Staged files, attached from their local paths.
            subject: Subject line.
            text_body: Plain text alternative for text-only mail clients.

        Returns:
            ChannelOutcome with one EMAIL delivery for the message and one
            failed EMAIL delivery per rejected address.
        """
        if not self._settings.is_configured:
            logger.error("email_channel_not_configured")
            return ChannelOutcome.failed(self.channel_name, "NOT_CONFIGURED")

        addresses: List[str] = []
        rejected: List[Delivery] = []
        for recipient in recipients:
            resolved = self.resolve_recipient(recipient)
            if not resolved.is_success:
                logger.warning("email_recipient_rejected", error=resolved.message)
                rejected.append(
                    self._rejected_delivery(recipient, resolved.error_code)
                )
                continue
            addresses.append(resolved.data["address"])

        if not addresses:
            if rejected:
                return ChannelOutcome.from_deliveries(self.channel_name, rejected)
            return ChannelOutcome.failed(self.channel_name, "NO_RECIPIENTS")

        try:
            message = self._build_message(
                addresses, body, attachments, subject, text_body
            )
            refused = self._deliver(message)
        except ChannelSendError as e:
            logger.error(
                "email_send_failed",
                recipient_count=len(addresses),
                error_code=e.error_code,
                error=str(e),
            )
            delivery = Delivery(
                kind=DeliveryKind.EMAIL,
                target=", ".join(addresses),
                success=False,
                error_code=e.error_code,
            )
            return ChannelOutcome.from_deliveries(
                self.channel_name, [delivery] + rejected
            )

        accepted = [address for address in addresses if address not in refused]
        for address in refused:
            logger.warning("email_recipient_refused", smtp_code=refused[address][0])
            rejected.append(self._rejected_delivery(address, "INVALID_RECIPIENT"))

        logger.info(
            "email_sent",
            recipient_count=len(accepted),
            refused_count=len(refused),
            attachment_count=len(attachments),
        )
        delivery = Delivery(
            kind=DeliveryKind.EMAIL,
            target=", ".join(accepted),
            success=True,
            external_id=message["Message-ID"],
        )
        return ChannelOutcome.from_deliveries(self.channel_name, [delivery] + rejected)

    def resolve_recipient(self, recipient: str) -> OperationResult:
        """Validate an inbox address.

        Args:
            recipient: Email address as configured.

        Returns:
            OperationResult with the normalized address in data["address"].
        """
        try:
            address = str(_email_adapter.validate_python(recipient.strip()))
        except ValidationError:
            return OperationResult.permanent(
                message=f"Invalid email address: {recipient!r}",
                error_code="INVALID_RECIPIENT",
            )
        return OperationResult.success(
            message="Email address validated", data={"address": address}
        )

    def health_check(self) -> OperationResult:
        """Check SMTP connectivity and credentials.

        Returns:
            OperationResult indicating channel health.
        """
        if not self._settings.is_configured:
            return OperationResult.permanent(
                message="SMTP credentials are not configured",
                error_code="NOT_CONFIGURED",
            )
        try:
            with self._connect():
                pass
        except (smtplib.SMTPException, OSError) as e:
            return classify_smtp_error(e)
        return OperationResult.success(message="SMTP server reachable")

    def _rejected_delivery(self, target: str, error_code: Optional[str]) -> Delivery:
        return Delivery(
            kind=DeliveryKind.EMAIL,
            target=target,
            success=False,
            error_code=error_code or "INVALID_RECIPIENT",
        )

    def _build_message(
        self,
        addresses: List[str],
        body: str,
        attachments: Sequence[Attachment],
        subject: Optional[str],
        text_body: Optional[str],
    ) -> EmailMessage:
        try:
            message = EmailMessage()
            message["From"] = formataddr(
                (self._settings.EMAIL_FROM_NAME, self._settings.EMAIL_USER)
            )
            message["To"] = ", ".join(addresses)
            message["Subject"] = subject or "Notification"
            message["Message-ID"] = make_msgid()
            message.set_content(text_body or PLAIN_TEXT_FALLBACK)
            message.add_alternative(body, subtype="html")
        except (ValueError, TypeError, MessageError) as e:
            raise ChannelSendError(
                f"Email message could not be built: {e}",
                error_code="MESSAGE_BUILD_FAILED",
            ) from e

        for attachment in attachments:
            maintype, _, subtype = attachment.content_type.partition("/")
            try:
                with open(attachment.path, "rb") as handle:
                    data = handle.read()
            except OSError as e:
                raise ChannelSendError(
                    f"Staged file unreadable: {attachment.filename}: {e}",
                    error_code="ATTACHMENT_UNREADABLE",
                ) from e
            try:
                message.add_attachment(
                    data,
                    maintype=maintype or "application",
                    subtype=subtype or "octet-stream",
                    filename=attachment.filename,
                )
            except (ValueError, TypeError, MessageError) as e:
                raise ChannelSendError(
                    f"Attachment could not be added: {attachment.filename}: {e}",
                    error_code="MESSAGE_BUILD_FAILED",
                ) from e
        return message

    def _connect(self) -> smtplib.SMTP:
        smtp = smtplib.SMTP(
            self._settings.SMTP_HOST,
            self._settings.SMTP_PORT,
            timeout=self._timeout,
        )
        try:
            if self._settings.SMTP_USE_TLS:
                smtp.starttls()
            smtp.login(self._settings.EMAIL_USER, self._settings.EMAIL_PASS or "")
        except BaseException:
            smtp.close()
            raise
        return smtp

    def _deliver(self, message: EmailMessage) -> Dict[str, tuple]:
        """Send the message and return the recipients the server refused."""
        try:
            with self._connect() as smtp:
                refused = smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            result = classify_smtp_error(e)
            raise ChannelSendError(result.message, error_code=result.error_category) from e
        return dict(refused or {})
