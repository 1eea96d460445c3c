"""Unit tests for infrastructure.configuration.settings module.

Tests cover:
- Section defaults and environment overrides
- Submission routing helpers
- Settings aggregation and the cached provider
"""

import pytest

from infrastructure.configuration.features.submissions import SubmissionSettings
from infrastructure.configuration.infrastructure.server import ServerSettings
from infrastructure.configuration.integrations import (
    AwsSettings,
    SmtpSettings,
    TwilioSettings,
)
from infrastructure.configuration.settings import Settings
from infrastructure.services.providers import get_settings

SETTINGS_ENV = [
    "PREFIX",
    "EMAIL_USER",
    "EMAIL_PASS",
    "TWILIO_SID",
    "TWILIO_AUTH_TOKEN",
    "EMAIL_RECIPIENTS",
    "WHATSAPP_RECIPIENTS",
    "SUBMISSION_CHANNELS",
    "SUBMISSION_MAX_FILES",
    "CORS_ALLOW_ORIGINS",
    "PORT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate from the developer's environment and any local .env file."""
    for name in SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestSmtpSettings:
    def test_defaults(self):
        smtp = SmtpSettings()

        assert smtp.SMTP_HOST == "smtp.gmail.com"
        assert smtp.SMTP_PORT == 587
        assert smtp.SMTP_USE_TLS is True
        assert smtp.is_configured is False

    def test_configured_with_credential_pair(self, monkeypatch):
        monkeypatch.setenv("EMAIL_USER", "cars@example.com")
        monkeypatch.setenv("EMAIL_PASS", "app-password")

        assert SmtpSettings().is_configured is True

    def test_user_without_password_is_not_configured(self, monkeypatch):
        monkeypatch.setenv("EMAIL_USER", "cars@example.com")

        assert SmtpSettings().is_configured is False


class TestTwilioSettings:
    def test_configured_with_credential_pair(self, monkeypatch):
        monkeypatch.setenv("TWILIO_SID", "AC123")
        monkeypatch.setenv("TWILIO_AUTH_TOKEN", "token")

        twilio = TwilioSettings()

        assert twilio.is_configured is True
        assert twilio.TWILIO_WHATSAPP_FROM.startswith("whatsapp:+")

    def test_missing_token(self, monkeypatch):
        monkeypatch.setenv("TWILIO_SID", "AC123")

        assert TwilioSettings().is_configured is False


class TestAwsSettings:
    def test_defaults(self):
        aws = AwsSettings()

        assert aws.MEDIA_PREFIX == "submissions"
        assert aws.MEDIA_URL_EXPIRY_SECONDS == 604800
        assert aws.LISTINGS_TABLE == "CarListing"
        assert aws.DYNAMODB_ENDPOINT_URL is None


class TestSubmissionSettings:
    def test_defaults(self):
        submissions = SubmissionSettings()

        assert submissions.MAX_FILES == 10
        assert submissions.EMAIL_RECIPIENTS == []
        assert submissions.SUBMISSION_CHANNELS == {
            "default": ["email", "chat"],
            "email": ["email"],
            "whatsapp": ["chat"],
        }

    def test_json_lists_from_env(self, monkeypatch):
        monkeypatch.setenv("EMAIL_RECIPIENTS", '["a@example.com", "b@example.com"]')
        monkeypatch.setenv("WHATSAPP_RECIPIENTS", '["whatsapp:+919800000000"]')
        monkeypatch.setenv("SUBMISSION_CHANNELS", '{"default": ["chat"]}')
        monkeypatch.setenv("SUBMISSION_MAX_FILES", "5")

        submissions = SubmissionSettings()

        assert submissions.recipients_by_channel == {
            "email": ["a@example.com", "b@example.com"],
            "chat": ["whatsapp:+919800000000"],
        }
        assert submissions.SUBMISSION_CHANNELS == {"default": ["chat"]}
        assert submissions.MAX_FILES == 5

    def test_recipients_by_channel_returns_copies(self):
        submissions = SubmissionSettings()

        submissions.recipients_by_channel["email"].append("x@example.com")

        assert submissions.recipients_by_channel["email"] == []


class TestServerSettings:
    def test_defaults(self):
        server = ServerSettings()

        assert server.HOST == "0.0.0.0"
        assert server.PORT == 5000
        assert server.CORS_ALLOW_ORIGINS == ["*"]

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", '["https://cars.example"]')

        server = ServerSettings()

        assert server.PORT == 8080
        assert server.CORS_ALLOW_ORIGINS == ["https://cars.example"]


class TestSettings:
    def test_sections_instantiated(self):
        settings = Settings()

        assert isinstance(settings.smtp, SmtpSettings)
        assert isinstance(settings.twilio, TwilioSettings)
        assert isinstance(settings.aws, AwsSettings)
        assert isinstance(settings.submissions, SubmissionSettings)
        assert isinstance(settings.server, ServerSettings)

    def test_section_override(self):
        smtp = SmtpSettings.model_construct(SMTP_HOST="mail.example.com")

        settings = Settings(smtp=smtp)

        assert settings.smtp.SMTP_HOST == "mail.example.com"

    def test_is_production(self, monkeypatch):
        assert Settings().is_production is True

        monkeypatch.setenv("PREFIX", "dev-")

        assert Settings().is_production is False


class TestGetSettings:
    def test_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
