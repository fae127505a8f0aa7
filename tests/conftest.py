"""Pytest configuration for all tests."""

import pytest
import structlog

from rolerank.core.config import get_settings


@pytest.fixture(autouse=True)
def _reset_logging_and_settings():
    """Undo logging configuration and cached settings between tests.

    CLI tests configure structlog against CliRunner's streams, which are
    closed once the invocation ends.
    """
    yield
    structlog.reset_defaults()
    get_settings.cache_clear()
