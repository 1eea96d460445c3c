"""Attachment stager.

Persists uploaded file parts to a scoped temporary location for the
duration of one submission and removes them again afterwards.
"""

import mimetypes
import os
import tempfile
from typing import List, Optional, Sequence

from infrastructure.attachments.errors import StageError
from infrastructure.attachments.models import Attachment, UploadPart
from infrastructure.logging import get_module_logger

logger = get_module_logger()

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class AttachmentStager:
    """Stages upload parts on local disk.

    Every staged file gets a unique name inside ``staging_dir`` so that
    concurrent submissions never share a path, even when clients upload
    files with identical names.

    Attributes:
        staging_dir: Directory for staged files (system temp dir if None)
        max_files: Maximum number of parts accepted per call
        max_file_size: Maximum size in bytes of a single part
    """

    def __init__(
        self,
        staging_dir: Optional[str] = None,
        max_files: int = 10,
        max_file_size: int = 10 * 1024 * 1024,
    ):
        self.staging_dir = staging_dir
        self.max_files = max_files
        self.max_file_size = max_file_size
        if staging_dir:
            os.makedirs(staging_dir, exist_ok=True)

    def stage(self, parts: Sequence[UploadPart]) -> List[Attachment]:
        """Write every part to disk.

        Parts without a filename and without content (an untouched file
        input) are ignored.

        Args:
            parts: Raw (filename, bytes, content type) parts, in request order

        Returns:
            One Attachment per non-empty part, in input order

        Raises:
            StageError: Too many parts, a part over the size limit, or a
                filesystem error. Files already written by this call are
                removed before the error propagates.
        """
        parts = [p for p in parts if p.filename or p.content]

        if len(parts) > self.max_files:
            raise StageError(
                f"{len(parts)} files submitted, at most {self.max_files} allowed",
                error_code="TOO_MANY_FILES",
            )

        staged: List[Attachment] = []
        try:
            for part in parts:
                staged.append(self._stage_part(part))
        except Exception as e:
            leaked = self.cleanup(staged)
            logger.warning(
                "staging_aborted",
                staged_count=len(staged),
                leaked=leaked,
                error=str(e),
            )
            if isinstance(e, StageError):
                raise
            raise StageError(f"Could not stage upload: {e}") from e

        logger.debug("attachments_staged", count=len(staged))
        return staged

    def cleanup(self, attachments: Sequence[Attachment]) -> List[str]:
        """Remove staged files, best-effort.

        Returns:
            Paths that could not be removed (leaked).
        """
        leaked = []
        for attachment in attachments:
            try:
                os.remove(attachment.path)
            except FileNotFoundError:
                continue
            except OSError as e:
                leaked.append(attachment.path)
                logger.error(
                    "staged_cleanup_failed", path=attachment.path, error=str(e)
                )
        return leaked

    def _stage_part(self, part: UploadPart) -> Attachment:
        size = len(part.content)
        filename = os.path.basename((part.filename or "").replace("\\", "/")) or "upload"
        if size > self.max_file_size:
            raise StageError(
                f"{filename} is {size} bytes, limit is {self.max_file_size}",
                error_code="FILE_TOO_LARGE",
            )

        content_type = (
            part.content_type
            or mimetypes.guess_type(filename)[0]
            or DEFAULT_CONTENT_TYPE
        )
        _, extension = os.path.splitext(filename)
        fd, path = tempfile.mkstemp(
            prefix="submission-", suffix=extension, dir=self.staging_dir
        )
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(part.content)
        except OSError:
            os.remove(path)
            raise

        return Attachment(
            filename=filename,
            path=path,
            content_type=content_type,
            size=size,
        )
