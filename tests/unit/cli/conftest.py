"""Shared fixtures for CLI tests."""

import pytest
from click.testing import CliRunner

from agency_finance.config.logging_config import reset_logging


@pytest.fixture
def runner():
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_env(mock_env, monkeypatch):
    """Test configuration with console logging off so stdout holds only output."""
    monkeypatch.setenv("LOG_CONSOLE", "false")
    yield mock_env
    reset_logging()
