"""Attachment staging and publishing.

Usage:
    from infrastructure.attachments import AttachmentStager, UploadPart

    stager = AttachmentStager(max_files=10)
    attachments = stager.stage([UploadPart("front.jpg", data, "image/jpeg")])
    try:
        ...
    finally:
        stager.cleanup(attachments)
"""

from infrastructure.attachments.errors import PublishError, StageError
from infrastructure.attachments.models import Attachment, UploadPart
from infrastructure.attachments.publisher import AssetPublisher, S3AssetPublisher
from infrastructure.attachments.staging import AttachmentStager

__all__ = [
    "Attachment",
    "UploadPart",
    "StageError",
    "PublishError",
    "AttachmentStager",
    "AssetPublisher",
    "S3AssetPublisher",
]
