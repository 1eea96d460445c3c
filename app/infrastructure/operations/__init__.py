"""Operation result types and status enums.

Standardized result types for provider calls, including status enums,
the result dataclass, and error classifiers for provider exceptions.
"""

from infrastructure.operations.classifiers import (
    classify_aws_error,
    classify_smtp_error,
    classify_twilio_error,
)
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "classify_aws_error",
    "classify_smtp_error",
    "classify_twilio_error",
]
