"""Submission feature settings."""

from typing import Dict, List, Optional

from pydantic import Field

from infrastructure.configuration.base import EnvSection

DEFAULT_SUBMISSION_TYPE = "default"


class SubmissionSettings(EnvSection):
    """Car submission fan-out configuration.

    Recipients and channel routing are data, not code: every submission
    type maps to the list of channel names it is delivered to.

    Environment Variables:
        EMAIL_RECIPIENTS: JSON list of inbox addresses for the email channel
        WHATSAPP_RECIPIENTS: JSON list of ``whatsapp:+<E.164>`` identities
        SUBMISSION_CHANNELS: JSON map of submission type to channel names
            (default: {"default": ["email", "chat"], "email": ["email"],
            "whatsapp": ["chat"]})
        SUBMISSION_MAX_FILES: Maximum attachments per submission (default: 10)
        SUBMISSION_MAX_FILE_SIZE_BYTES: Maximum size of one attachment
            (default: 10 MiB)
        SUBMISSION_STAGING_DIR: Directory for staged uploads (default: system
            temp directory)
        PROVIDER_TIMEOUT_SECONDS: Socket timeout of a single provider call
        PUBLISH_TIMEOUT_SECONDS: Time one attachment may spend publishing,
            counted from when a worker starts it
        CHANNEL_TIMEOUT_SECONDS: Time one channel send may run, counted from
            when a worker starts it
        SUBMISSION_MAX_WORKERS: Size of the shared fan-out thread pool
        BUSINESS_NAME: Name used in rendered messages
        EMAIL_SUBJECT: Subject line of submission emails
        LOGO_URL: Logo shown at the top of submission emails

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        routes = settings.submissions.SUBMISSION_CHANNELS
        ```
    """

    EMAIL_RECIPIENTS: List[str] = Field(
        default_factory=list, alias="EMAIL_RECIPIENTS"
    )
    WHATSAPP_RECIPIENTS: List[str] = Field(
        default_factory=list, alias="WHATSAPP_RECIPIENTS"
    )
    SUBMISSION_CHANNELS: Dict[str, List[str]] = Field(
        default_factory=lambda: {
            DEFAULT_SUBMISSION_TYPE: ["email", "chat"],
            "email": ["email"],
            "whatsapp": ["chat"],
        },
        alias="SUBMISSION_CHANNELS",
    )
    MAX_FILES: int = Field(default=10, alias="SUBMISSION_MAX_FILES")
    MAX_FILE_SIZE_BYTES: int = Field(
        default=10 * 1024 * 1024, alias="SUBMISSION_MAX_FILE_SIZE_BYTES"
    )
    STAGING_DIR: Optional[str] = Field(default=None, alias="SUBMISSION_STAGING_DIR")
    PROVIDER_TIMEOUT_SECONDS: float = Field(
        default=20.0, alias="PROVIDER_TIMEOUT_SECONDS"
    )
    PUBLISH_TIMEOUT_SECONDS: float = Field(
        default=60.0, alias="PUBLISH_TIMEOUT_SECONDS"
    )
    CHANNEL_TIMEOUT_SECONDS: float = Field(
        default=60.0, alias="CHANNEL_TIMEOUT_SECONDS"
    )
    MAX_WORKERS: int = Field(default=8, alias="SUBMISSION_MAX_WORKERS")
    BUSINESS_NAME: str = Field(default="Maa Bhawani Car Bazar", alias="BUSINESS_NAME")
    EMAIL_SUBJECT: str = Field(
        default="New Car Submission Received", alias="EMAIL_SUBJECT"
    )
    LOGO_URL: Optional[str] = Field(default=None, alias="LOGO_URL")

    @property
    def recipients_by_channel(self) -> Dict[str, List[str]]:
        """Configured recipients keyed by channel name."""
        return {
            "email": list(self.EMAIL_RECIPIENTS),
            "chat": list(self.WHATSAPP_RECIPIENTS),
        }
