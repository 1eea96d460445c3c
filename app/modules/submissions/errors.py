"""Submission errors."""


class UnknownSubmissionTypeError(ValueError):
    """Raised when a submission names a type with no configured channels."""

    def __init__(self, submission_type: str):
        super().__init__(f"Unknown submission type: {submission_type!r}")
        self.submission_type = submission_type
