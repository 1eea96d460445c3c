"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for core infrastructure services.
"""

from functools import lru_cache
from typing import Any, List, Optional

import boto3
from botocore.config import Config
from twilio.http.http_client import TwilioHttpClient
from twilio.rest import Client as TwilioClient

from infrastructure.attachments import AssetPublisher, AttachmentStager, S3AssetPublisher
from infrastructure.configuration import Settings
from infrastructure.notifications import ChatChannel, EmailChannel, NotificationChannel
from modules.listings.repository import ListingRepository
from modules.submissions.dispatcher import SubmissionDispatcher


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    This is the single source of truth for settings across the entire application.
    The @lru_cache decorator ensures only ONE instance is created per process,
    even if called from multiple packages.

    Infrastructure packages should use this directly to ensure singleton consistency:
        from infrastructure.services.providers import get_settings
        settings = get_settings()

    Application code should use the DI type alias for testability:
        from infrastructure.services import SettingsDep
        @router.get("/config")
        def get_config(settings: SettingsDep):
            return settings.server.APP_TITLE

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


def _aws_client_config(settings: Settings) -> Config:
    timeout = settings.submissions.PROVIDER_TIMEOUT_SECONDS
    return Config(
        region_name=settings.aws.AWS_REGION,
        connect_timeout=timeout,
        read_timeout=timeout,
        retries={"total_max_attempts": 1},
    )


@lru_cache
def get_s3_client() -> Any:
    """S3 client used to publish attachments.

    Credentials come from boto3's default provider chain. Retries are
    disabled: a failed publish fails the dependent channel instead.
    """
    settings = get_settings()
    return boto3.client("s3", config=_aws_client_config(settings))


@lru_cache
def get_dynamodb_client() -> Any:
    """DynamoDB client used to read listings."""
    settings = get_settings()
    return boto3.client(
        "dynamodb",
        config=_aws_client_config(settings),
        endpoint_url=settings.aws.DYNAMODB_ENDPOINT_URL,
    )


@lru_cache
def get_twilio_client() -> Optional[TwilioClient]:
    """Twilio REST client, or None when credentials are not configured.

    The HTTP client carries the provider timeout so a hung request can
    never outlive the channel.
    """
    settings = get_settings()
    if not settings.twilio.is_configured:
        return None
    http_client = TwilioHttpClient(
        timeout=settings.submissions.PROVIDER_TIMEOUT_SECONDS
    )
    return TwilioClient(
        settings.twilio.TWILIO_SID,
        settings.twilio.TWILIO_AUTH_TOKEN,
        http_client=http_client,
    )


@lru_cache
def get_attachment_stager() -> AttachmentStager:
    settings = get_settings()
    return AttachmentStager(
        staging_dir=settings.submissions.STAGING_DIR,
        max_files=settings.submissions.MAX_FILES,
        max_file_size=settings.submissions.MAX_FILE_SIZE_BYTES,
    )


@lru_cache
def get_asset_publisher() -> AssetPublisher:
    settings = get_settings()
    return S3AssetPublisher(
        client=get_s3_client(),
        bucket=settings.aws.MEDIA_BUCKET,
        prefix=settings.aws.MEDIA_PREFIX,
        url_expiry_seconds=settings.aws.MEDIA_URL_EXPIRY_SECONDS,
    )


def get_channels() -> List[NotificationChannel]:
    """Build every available channel sender from settings."""
    settings = get_settings()
    return [
        EmailChannel(
            settings.smtp, timeout=settings.submissions.PROVIDER_TIMEOUT_SECONDS
        ),
        ChatChannel(get_twilio_client(), settings.twilio.TWILIO_WHATSAPP_FROM),
    ]


@lru_cache
def get_submission_dispatcher() -> SubmissionDispatcher:
    """
    Get application-scoped submission dispatcher singleton.

    Owns the fan-out thread pool; shut it down at process exit with
    ``get_submission_dispatcher().shutdown()``.

    Returns:
        SubmissionDispatcher: Dispatcher wired to the configured channels.

    Raises:
        ValueError: Routing or recipient configuration is invalid.
    """
    settings = get_settings()
    submissions = settings.submissions
    return SubmissionDispatcher(
        stager=get_attachment_stager(),
        publisher=get_asset_publisher(),
        channels=get_channels(),
        recipients=submissions.recipients_by_channel,
        routes=submissions.SUBMISSION_CHANNELS,
        publish_timeout=submissions.PUBLISH_TIMEOUT_SECONDS,
        channel_timeout=submissions.CHANNEL_TIMEOUT_SECONDS,
        max_workers=submissions.MAX_WORKERS,
        business_name=submissions.BUSINESS_NAME,
        email_subject=submissions.EMAIL_SUBJECT,
        logo_url=submissions.LOGO_URL,
    )


@lru_cache
def get_listing_repository() -> ListingRepository:
    settings = get_settings()
    return ListingRepository(
        client=get_dynamodb_client(), table_name=settings.aws.LISTINGS_TABLE
    )
