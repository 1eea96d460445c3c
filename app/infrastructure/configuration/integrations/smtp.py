"""SMTP mail provider settings."""

from pydantic import Field

from infrastructure.configuration.base import EnvSection


class SmtpSettings(EnvSection):
    """SMTP transport configuration for the email channel.

    Environment Variables:
        SMTP_HOST: SMTP server hostname (default: smtp.gmail.com)
        SMTP_PORT: SMTP server port (default: 587)
        SMTP_USE_TLS: Issue STARTTLS after connecting (default: True)
        EMAIL_USER: Mailbox login, also used as the sender address
        EMAIL_PASS: Mailbox password or app password
        EMAIL_FROM_NAME: Display name of the sender (default: Car Bazar)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        host = settings.smtp.SMTP_HOST
        sender = settings.smtp.EMAIL_USER
        ```
    """

    SMTP_HOST: str = Field(default="smtp.gmail.com", alias="SMTP_HOST")
    SMTP_PORT: int = Field(default=587, alias="SMTP_PORT")
    SMTP_USE_TLS: bool = Field(default=True, alias="SMTP_USE_TLS")
    EMAIL_USER: str = Field(default="", alias="EMAIL_USER")
    EMAIL_PASS: str | None = Field(default=None, alias="EMAIL_PASS")
    EMAIL_FROM_NAME: str = Field(default="Car Bazar", alias="EMAIL_FROM_NAME")

    @property
    def is_configured(self) -> bool:
        """True when both halves of the credential pair are present."""
        return bool(self.EMAIL_USER and self.EMAIL_PASS)
