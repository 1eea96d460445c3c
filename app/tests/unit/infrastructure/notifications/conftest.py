"""Test fixtures for notification infrastructure tests."""

import pytest
from unittest.mock import MagicMock

from infrastructure.attachments import Attachment
from infrastructure.configuration.integrations import SmtpSettings


@pytest.fixture
def smtp_settings():
    """SMTP settings with credentials, built without reading the environment."""
    return SmtpSettings.model_construct(
        SMTP_HOST="smtp.example.com",
        SMTP_PORT=587,
        SMTP_USE_TLS=True,
        EMAIL_USER="portal@example.com",
        EMAIL_PASS="app-password",
        EMAIL_FROM_NAME="Car Bazar",
    )


@pytest.fixture
def attachment_factory(tmp_path):
    """Factory for staged Attachment instances backed by real files.

    Example:
        attachment = attachment_factory("rc.pdf", published_url="https://m/rc.pdf")
        failed = attachment_factory("side.jpg", publish_error="TIMEOUT")
    """

    def _factory(
        filename="front.jpg",
        content=b"jpeg-bytes",
        content_type="image/jpeg",
        published_url=None,
        publish_error=None,
    ):
        path = tmp_path / f"staged-{filename}"
        path.write_bytes(content)
        return Attachment(
            filename=filename,
            path=str(path),
            content_type=content_type,
            size=len(content),
            published_url=published_url,
            publish_error=publish_error,
        )

    return _factory


@pytest.fixture
def mock_twilio_client():
    """Twilio client whose messages.create returns sequential SIDs."""
    client = MagicMock()
    client.account_sid = "AC123"
    counter = {"n": 0}

    def _create(**kwargs):
        counter["n"] += 1
        message = MagicMock()
        message.sid = f"SM{counter['n']:03d}"
        return message

    client.messages.create.side_effect = _create
    return client
