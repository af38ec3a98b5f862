"""
Pytest configuration and shared fixtures for BuildCacheKit tests.
"""

import logging

import pytest

# Import test fixtures to make them available to all tests
# These imports register the fixtures with pytest's fixture discovery system
# ruff: noqa: F401
from tests.fixtures.caches import (
    source_base,
    destination_base,
    source_cache,
    write_plan,
)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture
def quiet_logger() -> logging.Logger:
    """Logger for engine tests, isolated from the module logger."""
    logger = logging.getLogger("tests.transfer")
    logger.setLevel(logging.DEBUG)
    return logger
