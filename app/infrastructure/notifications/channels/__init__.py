"""Notification channel implementations."""

from infrastructure.notifications.channels.base import NotificationChannel
from infrastructure.notifications.channels.chat import ChatChannel
from infrastructure.notifications.channels.email import EmailChannel

__all__ = [
    "NotificationChannel",
    "ChatChannel",
    "EmailChannel",
]
