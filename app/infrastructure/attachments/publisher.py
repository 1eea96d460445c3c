"""Remote asset publisher.

Uploads a staged attachment to a media host and returns a URL that
external channels (WhatsApp media messages) can fetch.
"""

import uuid
from abc import ABC, abstractmethod
from typing import Any

from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError

from infrastructure.attachments.errors import PublishError
from infrastructure.attachments.models import Attachment
from infrastructure.logging import get_module_logger
from infrastructure.operations import classify_aws_error

logger = get_module_logger()


class AssetPublisher(ABC):
    """Abstract base class for media hosts."""

    @abstractmethod
    def publish(self, attachment: Attachment) -> str:
        """Upload the attachment and return a durable, retrievable URL.

        Publishing twice creates two remote copies.

        Raises:
            PublishError: On network or provider failure.
        """


class S3AssetPublisher(AssetPublisher):
    """Publishes attachments to an S3 bucket behind presigned GET URLs.

    Attributes:
        bucket: Target bucket name
        prefix: Key prefix; each upload lands in ``<prefix>/<uuid>/<filename>``
        url_expiry_seconds: Lifetime of the returned presigned URL
    """

    def __init__(
        self,
        client: Any,
        bucket: str,
        prefix: str = "submissions",
        url_expiry_seconds: int = 604800,
    ):
        self._client = client
        self.bucket = bucket
        self.prefix = prefix.strip("/")
        self.url_expiry_seconds = url_expiry_seconds

    def publish(self, attachment: Attachment) -> str:
        if not self.bucket:
            raise PublishError("MEDIA_BUCKET is not configured", "NOT_CONFIGURED")

        key = "/".join(
            part
            for part in (self.prefix, uuid.uuid4().hex, attachment.filename)
            if part
        )
        try:
            self._client.upload_file(
                Filename=attachment.path,
                Bucket=self.bucket,
                Key=key,
                ExtraArgs={"ContentType": attachment.content_type},
            )
            url = self._client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=self.url_expiry_seconds,
            )
        except S3UploadFailedError as e:
            logger.error(
                "asset_publish_failed",
                filename=attachment.filename,
                bucket=self.bucket,
                error=str(e),
                error_code="UPLOAD_FAILED",
            )
            raise PublishError(str(e), "UPLOAD_FAILED") from e
        except (BotoCoreError, ClientError, OSError) as e:
            result = classify_aws_error(e)
            logger.error(
                "asset_publish_failed",
                filename=attachment.filename,
                bucket=self.bucket,
                error=result.message,
                error_code=result.error_code,
                transient=result.is_transient,
            )
            raise PublishError(result.message, result.error_category) from e

        logger.info(
            "asset_published",
            filename=attachment.filename,
            bucket=self.bucket,
            key=key,
            size=attachment.size,
        )
        return url
