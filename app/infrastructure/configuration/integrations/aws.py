"""AWS integration settings."""

from typing import Optional

from pydantic import Field

from infrastructure.configuration.base import EnvSection


class AwsSettings(EnvSection):
    """AWS configuration for the media bucket and the listings table.

    Credentials are resolved by boto3's default provider chain
    (AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY, profile, or role).

    Environment Variables:
        AWS_REGION: AWS region for services (default: ap-south-1)
        MEDIA_BUCKET: S3 bucket that hosts published attachments
        MEDIA_PREFIX: Key prefix for published attachments (default: submissions)
        MEDIA_URL_EXPIRY_SECONDS: Lifetime of presigned media URLs (default: 7 days)
        LISTINGS_TABLE: DynamoDB table holding car listings (default: CarListing)
        DYNAMODB_ENDPOINT_URL: Optional endpoint override (dynamodb-local)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        bucket = settings.aws.MEDIA_BUCKET
        table = settings.aws.LISTINGS_TABLE
        ```
    """

    AWS_REGION: str = Field(default="ap-south-1", alias="AWS_REGION")
    MEDIA_BUCKET: str = Field(default="", alias="MEDIA_BUCKET")
    MEDIA_PREFIX: str = Field(default="submissions", alias="MEDIA_PREFIX")
    MEDIA_URL_EXPIRY_SECONDS: int = Field(
        default=604800, alias="MEDIA_URL_EXPIRY_SECONDS"
    )
    LISTINGS_TABLE: str = Field(default="CarListing", alias="LISTINGS_TABLE")
    DYNAMODB_ENDPOINT_URL: Optional[str] = Field(
        default=None, alias="DYNAMODB_ENDPOINT_URL"
    )
