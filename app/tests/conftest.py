"""Shared fixtures for the whole test suite."""

import pytest

from api.dependencies.rate_limits import get_limiter
from infrastructure.services import providers


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Give every test a fresh rate-limit window."""
    get_limiter().reset()
    yield
    get_limiter().reset()


@pytest.fixture
def fresh_providers():
    """Drop cached provider singletons before and after the test."""
    cached = [
        providers.get_settings,
        providers.get_s3_client,
        providers.get_dynamodb_client,
        providers.get_twilio_client,
        providers.get_attachment_stager,
        providers.get_asset_publisher,
        providers.get_submission_dispatcher,
        providers.get_listing_repository,
    ]
    for provider in cached:
        provider.cache_clear()
    yield
    for provider in cached:
        provider.cache_clear()
