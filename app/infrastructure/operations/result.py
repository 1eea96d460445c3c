"""Provider call results.

Provider wrappers (SMTP, Twilio, S3, DynamoDB) classify SDK exceptions into
an OperationResult instead of letting them escape. Only ``error_code`` ever
reaches an HTTP caller; ``message`` may hold provider text and is for logs.
"""

from dataclasses import dataclass
from typing import Any, Optional

from infrastructure.operations.status import OperationStatus


@dataclass(frozen=True)
class OperationResult:
    """Outcome of one provider call.

    Attributes:
        status: Coarse outcome class
        message: Log-only description, may contain provider text
        data: Payload of a successful call (message id, URL, items)
        error_code: Redacted machine category, e.g. ``TIMEOUT``
        retry_after: Seconds the provider asked us to back off
    """

    status: OperationStatus
    message: str = ""
    data: Optional[Any] = None
    error_code: Optional[str] = None
    retry_after: Optional[int] = None

    @property
    def is_success(self) -> bool:
        return self.status is OperationStatus.SUCCESS

    @property
    def is_transient(self) -> bool:
        """True when repeating the call later could succeed."""
        return self.status is OperationStatus.TRANSIENT_ERROR

    @property
    def error_category(self) -> Optional[str]:
        """Code safe to show callers; falls back to the status name."""
        if self.is_success:
            return None
        return self.error_code or self.status.name

    @classmethod
    def success(cls, data: Optional[Any] = None, message: str = "ok") -> "OperationResult":
        return cls(OperationStatus.SUCCESS, message, data=data)

    @classmethod
    def failure(
        cls,
        status: OperationStatus,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
    ) -> "OperationResult":
        """Failed result with an explicit status (UNAUTHORIZED, NOT_FOUND, ...)."""
        return cls(status, message, error_code=error_code, retry_after=retry_after)

    @classmethod
    def transient(
        cls,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
    ) -> "OperationResult":
        """Network trouble, timeouts and throttling."""
        return cls.failure(
            OperationStatus.TRANSIENT_ERROR, message, error_code, retry_after
        )

    @classmethod
    def permanent(cls, message: str, error_code: Optional[str] = None) -> "OperationResult":
        """Rejected input or configuration; repeating will not help."""
        return cls.failure(OperationStatus.PERMANENT_ERROR, message, error_code)
