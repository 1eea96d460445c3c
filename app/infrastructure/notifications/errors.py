"""Errors raised inside channel senders."""


class ChannelSendError(Exception):
    """Raised when a provider call made by a channel fails.

    Never escapes a channel: ``NotificationChannel.send`` converts it into
    a failed Delivery / ChannelOutcome.

    Attributes:
        message: provider detail, for logs only
        error_code: redacted category
    """

    def __init__(self, message: str, error_code: str = "PROVIDER_ERROR"):
        super().__init__(message)
        self.error_code = error_code
