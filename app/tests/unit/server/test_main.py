"""Unit tests for main module."""

from unittest.mock import patch

import pytest

import main
from server import server


@pytest.mark.unit
def test_server_app_exported():
    assert main.server_app is server.handler


@pytest.mark.unit
@patch("main.uvicorn.run")
def test_main_runs_uvicorn(mock_run):
    settings = main.get_settings()

    main.main()

    mock_run.assert_called_once_with(
        main.server_app,
        host=settings.server.HOST,
        port=settings.server.PORT,
        log_config=None,
    )
