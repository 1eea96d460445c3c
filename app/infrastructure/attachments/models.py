"""Attachment models shared by the stager, the publisher and the channels."""

from dataclasses import dataclass, replace
from typing import NamedTuple, Optional


class UploadPart(NamedTuple):
    """One raw file part taken from an inbound multipart request."""

    filename: str
    content: bytes
    content_type: Optional[str] = None


@dataclass(frozen=True)
class Attachment:
    """One staged upload.

    Attributes:
        filename: Original (base) filename supplied by the client
        path: Local path of the staged copy
        content_type: MIME type, ``application/octet-stream`` if unknown
        size: Size in bytes
        published_url: Durable URL, set only for channels that need one
        publish_error: Error category when publishing failed
    """

    filename: str
    path: str
    content_type: str
    size: int
    published_url: Optional[str] = None
    publish_error: Optional[str] = None

    def with_published_url(self, url: str) -> "Attachment":
        return replace(self, published_url=url, publish_error=None)

    def with_publish_error(self, error_code: str) -> "Attachment":
        return replace(self, published_url=None, publish_error=error_code)
