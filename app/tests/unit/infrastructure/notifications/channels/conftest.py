"""Fixtures for channel sender tests."""

import pytest
from unittest.mock import MagicMock, patch


@pytest.fixture
def mock_smtp():
    """Patch smtplib.SMTP in the email channel module.

    Yields the SMTP class mock; the connection object used inside the
    ``with`` block is ``mock_smtp.return_value``.
    """
    with patch("infrastructure.notifications.channels.email.smtplib.SMTP") as smtp_cls:
        connection = MagicMock()
        connection.__enter__.return_value = connection
        connection.send_message.return_value = {}
        smtp_cls.return_value = connection
        yield smtp_cls
