"""Feature settings __init__ - exports all feature settings."""

from infrastructure.configuration.features.submissions import (
    DEFAULT_SUBMISSION_TYPE,
    SubmissionSettings,
)

__all__ = [
    "DEFAULT_SUBMISSION_TYPE",
    "SubmissionSettings",
]
