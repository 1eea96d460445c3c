"""Error classifiers for provider exceptions.

Converts provider-specific exceptions (botocore, smtplib, Twilio) into
standardized OperationResult objects. The ``error_code`` of the result is a
redacted category that is safe to hand back to HTTP callers; the
``message`` keeps the provider detail for logs only.

Key Functions:
- classify_aws_error(): S3 / DynamoDB errors -> OperationResult
- classify_smtp_error(): smtplib and socket errors -> OperationResult
- classify_twilio_error(): Twilio REST and transport errors -> OperationResult

Usage:
    from infrastructure.operations.classifiers import classify_smtp_error

    try:
        smtp.send_message(message)
    except Exception as exc:
        return classify_smtp_error(exc)
"""

import smtplib
import socket

from botocore.exceptions import (
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    NoCredentialsError,
    ReadTimeoutError,
)
from requests.exceptions import ConnectionError as RequestsConnectionError
from requests.exceptions import Timeout as RequestsTimeout
from twilio.base.exceptions import TwilioRestException

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

# Twilio error codes for recipients that can never be reached as given
TWILIO_INVALID_RECIPIENT_CODES = frozenset({21211, 21614, 63003, 63024})


def _is_timeout(exc: Exception) -> bool:
    return isinstance(exc, (TimeoutError, socket.timeout))


def classify_aws_error(exc: Exception) -> OperationResult:
    """Classify AWS SDK errors into OperationResult.

    Error Code Mapping:
    - Connect/read timeouts: TIMEOUT (transient)
    - Endpoint unreachable: CONNECTION_ERROR (transient)
    - Missing credentials: UNAUTHORIZED
    - Throttling / SlowDown: RATE_LIMITED (transient, retry_after=60)
    - AccessDenied: FORBIDDEN (permanent)
    - NoSuchBucket / ResourceNotFoundException: NOT_FOUND
    - Other ClientError: AWS_CLIENT_ERROR (transient, AWS convention)

    Args:
        exc: Exception raised by boto3/botocore

    Returns:
        OperationResult with appropriate status and error_code
    """
    if isinstance(exc, (ConnectTimeoutError, ReadTimeoutError)) or _is_timeout(exc):
        return OperationResult.transient(
            f"AWS request timed out: {exc}", error_code="TIMEOUT"
        )

    if isinstance(exc, NoCredentialsError):
        return OperationResult.failure(
            OperationStatus.UNAUTHORIZED,
            "AWS credentials not found",
            error_code="UNAUTHORIZED",
        )

    if not isinstance(exc, ClientError):
        # EndpointConnectionError and other BotoCoreErrors are network issues
        code = (
            "CONNECTION_ERROR"
            if isinstance(exc, EndpointConnectionError)
            else "AWS_CONNECTION_ERROR"
        )
        return OperationResult.transient(
            f"AWS connection error: {type(exc).__name__}: {exc}",
            error_code=code,
        )

    error_code = exc.response.get("Error", {}).get("Code", "Unknown")

    if error_code in (
        "Throttling",
        "ThrottlingException",
        "RequestLimitExceeded",
        "SlowDown",
        "ProvisionedThroughputExceededException",
    ):
        return OperationResult.failure(
            OperationStatus.TRANSIENT_ERROR,
            "AWS API throttled",
            error_code="RATE_LIMITED",
            retry_after=60,
        )

    if error_code in ("AccessDenied", "AccessDeniedException"):
        return OperationResult.permanent(
            "AWS API access denied", error_code="FORBIDDEN"
        )

    if error_code in ("InvalidAccessKeyId", "SignatureDoesNotMatch", "ExpiredToken"):
        return OperationResult.failure(
            OperationStatus.UNAUTHORIZED,
            f"AWS credentials rejected: {error_code}",
            error_code="UNAUTHORIZED",
        )

    if error_code in ("NoSuchBucket", "NoSuchKey", "ResourceNotFoundException"):
        return OperationResult.failure(
            OperationStatus.NOT_FOUND,
            f"AWS resource not found: {error_code}",
            error_code="NOT_FOUND",
        )

    return OperationResult.transient(
        f"AWS client error: {error_code}",
        error_code="AWS_CLIENT_ERROR",
    )


def classify_smtp_error(exc: Exception) -> OperationResult:
    """Classify smtplib errors into OperationResult.

    Error Code Mapping:
    - Socket timeout: TIMEOUT
    - SMTPAuthenticationError: UNAUTHORIZED
    - SMTPRecipientsRefused: INVALID_RECIPIENT (permanent)
    - SMTPSenderRefused: SENDER_REFUSED (permanent)
    - SMTPDataError 5xx (size limits, policy): MESSAGE_REJECTED (permanent)
    - Disconnected / connect failures / OSError: CONNECTION_ERROR
    - Other SMTPException: PROVIDER_ERROR

    Args:
        exc: Exception raised while talking to the SMTP server

    Returns:
        OperationResult with appropriate status and error_code
    """
    if _is_timeout(exc):
        return OperationResult.transient(
            f"SMTP timed out: {exc}", error_code="TIMEOUT"
        )

    if isinstance(exc, smtplib.SMTPAuthenticationError):
        return OperationResult.failure(
            OperationStatus.UNAUTHORIZED,
            f"SMTP authentication failed ({exc.smtp_code})",
            error_code="UNAUTHORIZED",
        )

    if isinstance(exc, smtplib.SMTPRecipientsRefused):
        return OperationResult.permanent(
            f"SMTP refused recipients: {sorted(exc.recipients)}",
            error_code="INVALID_RECIPIENT",
        )

    if isinstance(exc, smtplib.SMTPSenderRefused):
        return OperationResult.permanent(
            f"SMTP refused sender ({exc.smtp_code})",
            error_code="SENDER_REFUSED",
        )

    if isinstance(exc, smtplib.SMTPDataError):
        if 500 <= exc.smtp_code < 600:
            return OperationResult.permanent(
                f"SMTP rejected message ({exc.smtp_code})",
                error_code="MESSAGE_REJECTED",
            )
        return OperationResult.transient(
            f"SMTP deferred message ({exc.smtp_code})",
            error_code="PROVIDER_ERROR",
        )

    if isinstance(
        exc, (smtplib.SMTPServerDisconnected, smtplib.SMTPConnectError)
    ) or (isinstance(exc, OSError) and not isinstance(exc, smtplib.SMTPException)):
        return OperationResult.transient(
            f"SMTP connection error: {type(exc).__name__}: {exc}",
            error_code="CONNECTION_ERROR",
        )

    return OperationResult.transient(
        f"SMTP error: {type(exc).__name__}: {exc}",
        error_code="PROVIDER_ERROR",
    )


def classify_twilio_error(exc: Exception) -> OperationResult:
    """Classify Twilio SDK errors into OperationResult.

    Error Code Mapping:
    - Transport timeout: TIMEOUT
    - Transport connection failure: CONNECTION_ERROR
    - HTTP 401/403: UNAUTHORIZED
    - HTTP 429: RATE_LIMITED (transient)
    - Invalid / unreachable WhatsApp recipient: INVALID_RECIPIENT
    - HTTP 5xx: PROVIDER_ERROR (transient)
    - Other HTTP 4xx: MESSAGE_REJECTED (permanent)

    Args:
        exc: Exception raised by the Twilio client

    Returns:
        OperationResult with appropriate status and error_code
    """
    if isinstance(exc, RequestsTimeout) or _is_timeout(exc):
        return OperationResult.transient(
            f"Twilio request timed out: {exc}", error_code="TIMEOUT"
        )

    if isinstance(exc, RequestsConnectionError):
        return OperationResult.transient(
            f"Twilio connection error: {exc}", error_code="CONNECTION_ERROR"
        )

    if not isinstance(exc, TwilioRestException):
        return OperationResult.transient(
            f"Twilio error: {type(exc).__name__}: {exc}",
            error_code="PROVIDER_ERROR",
        )

    status_code = exc.status

    if status_code in (401, 403):
        return OperationResult.failure(
            OperationStatus.UNAUTHORIZED,
            f"Twilio rejected credentials ({status_code})",
            error_code="UNAUTHORIZED",
        )

    if status_code == 429:
        return OperationResult.failure(
            OperationStatus.TRANSIENT_ERROR,
            "Twilio rate limited",
            error_code="RATE_LIMITED",
            retry_after=60,
        )

    if exc.code in TWILIO_INVALID_RECIPIENT_CODES:
        return OperationResult.permanent(
            f"Twilio rejected recipient (code {exc.code})",
            error_code="INVALID_RECIPIENT",
        )

    if status_code and 500 <= status_code < 600:
        return OperationResult.transient(
            f"Twilio server error ({status_code})",
            error_code="PROVIDER_ERROR",
        )

    return OperationResult.permanent(
        f"Twilio client error ({status_code}, code {exc.code}): {exc.msg}",
        error_code="MESSAGE_REJECTED",
    )
