"""Outcome classes of a provider call."""

from enum import Enum


class OperationStatus(Enum):
    """Coarse outcome of a call to SMTP, Twilio or AWS.

    The classifiers pick one of these for every provider exception; the
    finer category travels separately as ``OperationResult.error_code``.
    """

    SUCCESS = "success"
    # Timeouts, dropped connections, throttling
    TRANSIENT_ERROR = "transient_error"
    # Rejected recipient, malformed request, access denied
    PERMANENT_ERROR = "permanent_error"
    # Login or API credentials refused
    UNAUTHORIZED = "unauthorized"
    # Bucket, table or account missing
    NOT_FOUND = "not_found"
