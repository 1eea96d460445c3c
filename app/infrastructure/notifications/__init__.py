"""Notification channels for submission fan-out (Email, WhatsApp).

Provides the channel contract used by the submission dispatcher:
- Capability declaration (durable URLs, recipient limit, body format)
- One ChannelOutcome per send, never an exception
- Redacted error categories for HTTP callers

Usage:
    from infrastructure.notifications import EmailChannel, BodyFormat

    channel = EmailChannel(settings.smtp, timeout=20.0)
    if channel.capabilities().body_format is BodyFormat.HTML:
        outcome = channel.send(recipients, html_body, attachments, subject)

    if not outcome.success:
        logger.warning("channel_failed", error_code=outcome.error_code)
"""

# Models
from infrastructure.notifications.models import (
    BodyFormat,
    ChannelCapabilities,
    ChannelOutcome,
    Delivery,
    DeliveryKind,
)

# Errors
from infrastructure.notifications.errors import ChannelSendError

# Channel interface
from infrastructure.notifications.channels.base import NotificationChannel

# Channel implementations
from infrastructure.notifications.channels.chat import ChatChannel
from infrastructure.notifications.channels.email import EmailChannel

# Export all public interfaces
__all__ = [
    # Models
    "BodyFormat",
    "ChannelCapabilities",
    "ChannelOutcome",
    "Delivery",
    "DeliveryKind",
    # Errors
    "ChannelSendError",
    # Channel interface
    "NotificationChannel",
    # Channel implementations
    "ChatChannel",
    "EmailChannel",
]
