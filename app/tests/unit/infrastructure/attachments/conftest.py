"""Fixtures for attachment staging and publishing tests."""

import pytest
from unittest.mock import MagicMock

from infrastructure.attachments import AttachmentStager, UploadPart


@pytest.fixture
def staging_dir(tmp_path):
    path = tmp_path / "staging"
    path.mkdir()
    return path


@pytest.fixture
def stager(staging_dir):
    return AttachmentStager(
        staging_dir=str(staging_dir), max_files=10, max_file_size=1024
    )


@pytest.fixture
def part_factory():
    """Factory for UploadPart instances.

    Example:
        part = part_factory("rc.pdf", b"%PDF", "application/pdf")
    """

    def _factory(filename="front.jpg", content=b"\xff\xd8jpeg", content_type=None):
        return UploadPart(filename=filename, content=content, content_type=content_type)

    return _factory


@pytest.fixture
def mock_s3_client():
    client = MagicMock()
    client.generate_presigned_url.return_value = "https://media.example.com/signed"
    return client
