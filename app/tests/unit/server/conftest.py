"""Fixtures for server module unit tests."""

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI


@pytest.fixture
def mock_settings():
    """Create a mock settings object."""
    settings = MagicMock()
    settings.is_production = False
    settings.PREFIX = ""
    settings.GIT_SHA = "abc123"
    settings.model_dump.return_value = {
        "PREFIX": "",
        "GIT_SHA": "abc123",
        "smtp": {"SMTP_HOST": "smtp.gmail.com"},
    }
    settings.smtp.is_configured = True
    settings.twilio.is_configured = False
    settings.aws.MEDIA_BUCKET = ""
    return settings


@pytest.fixture
def app():
    return FastAPI()
