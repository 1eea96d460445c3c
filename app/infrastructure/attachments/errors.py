"""Errors raised while staging and publishing attachments."""


class StageError(Exception):
    """Raised when an upload cannot be staged.

    Rejects the whole submission before any external call is made.

    Attributes:
        message: human-friendly message for logs
        error_code: redacted category returned to the caller
    """

    def __init__(self, message: str, error_code: str = "STAGING_FAILED"):
        super().__init__(message)
        self.error_code = error_code


class PublishError(Exception):
    """Raised when a staged attachment cannot be published to the media host.

    Fails only the channels that need a durable URL for the attachment.

    Attributes:
        message: human-friendly message for logs
        error_code: redacted category (TIMEOUT, FORBIDDEN, ...)
    """

    def __init__(self, message: str, error_code: str = "PUBLISH_FAILED"):
        super().__init__(message)
        self.error_code = error_code
