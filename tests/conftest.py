"""Shared pytest fixtures."""

import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo logging configuration done by CLI commands."""
    yield
    structlog.reset_defaults()
