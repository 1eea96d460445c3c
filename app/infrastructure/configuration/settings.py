"""Process-wide settings, one object for every entry point."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from infrastructure.configuration.features import SubmissionSettings
from infrastructure.configuration.infrastructure import ServerSettings
from infrastructure.configuration.integrations import (
    AwsSettings,
    SmtpSettings,
    TwilioSettings,
)


class Settings(BaseSettings):
    """Aggregate of all settings sections.

    Each section reads its own variables from the environment when the
    aggregate is built; pass a section instance to override it (tests).

    Sections:
        smtp: Mail transport of the email channel
        twilio: WhatsApp sender of the chat channel
        aws: Media bucket and listings table
        submissions: Recipients, routing, limits and timeouts
        server: Bind address, CORS and API title

    Environment Variables:
        PREFIX: Deployment prefix; empty means production
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        GIT_SHA: Deployed revision, reported by /version

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        routes = settings.submissions.SUBMISSION_CHANNELS
        if not settings.smtp.is_configured:
            ...
        ```
    """

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    GIT_SHA: str = "Unknown"

    smtp: SmtpSettings = Field(default_factory=SmtpSettings)
    twilio: TwilioSettings = Field(default_factory=TwilioSettings)
    aws: AwsSettings = Field(default_factory=AwsSettings)
    submissions: SubmissionSettings = Field(default_factory=SubmissionSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return not self.PREFIX
