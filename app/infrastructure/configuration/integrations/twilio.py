"""Twilio messaging provider settings."""

from pydantic import Field

from infrastructure.configuration.base import EnvSection


class TwilioSettings(EnvSection):
    """Twilio WhatsApp configuration for the chat channel.

    Environment Variables:
        TWILIO_SID: Twilio account SID
        TWILIO_AUTH_TOKEN: Twilio auth token
        TWILIO_WHATSAPP_FROM: Sender identity, in ``whatsapp:+<E.164>`` form

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        sender = settings.twilio.TWILIO_WHATSAPP_FROM
        ```
    """

    TWILIO_SID: str = Field(default="", alias="TWILIO_SID")
    TWILIO_AUTH_TOKEN: str | None = Field(default=None, alias="TWILIO_AUTH_TOKEN")
    TWILIO_WHATSAPP_FROM: str = Field(
        default="whatsapp:+14155238886", alias="TWILIO_WHATSAPP_FROM"
    )

    @property
    def is_configured(self) -> bool:
        """True when both halves of the credential pair are present."""
        return bool(self.TWILIO_SID and self.TWILIO_AUTH_TOKEN)
