"""Base class shared by every settings section."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvSection(BaseSettings):
    """One section of ``Settings`` (smtp, twilio, aws, submissions, server).

    Sections read exact-case environment variables, falling back to a
    ``.env`` file in the working directory; unrelated variables are
    ignored so all sections can share one environment.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )
